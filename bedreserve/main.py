import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bedreserve.config import config
from bedreserve.db import init_db
from bedreserve.errors import NotFound, StateConflict, StoreFailure, ValidationError
from bedreserve.routers import beds, facilities, reservations

app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION)

app.include_router(beds.router, prefix="/beds", tags=["beds"])
app.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
app.include_router(facilities.router, prefix="/facilities", tags=["facilities"])

ERROR_STATUS = {
    NotFound: 404,
    ValidationError: 422,
    StateConflict: 409,
    StoreFailure: 503,
}


def _error_response(status_code):
    def handler(request: Request, exc):
        return JSONResponse(status_code=status_code, content=exc.to_dict())
    return handler


for error_cls, status_code in ERROR_STATUS.items():
    app.add_exception_handler(error_cls, _error_response(status_code))


def configure_logging():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.on_event("startup")
def on_startup():
    configure_logging()
    if os.getenv("SKIP_DB_INIT") == "1":
        return
    init_db()


@app.get("/")
def root():
    return {"ok": True, "service": "bedreserve"}
