# storefront/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.api import api_router
from storefront.data import models  # noqa: F401  rejestracja tabel w Base.metadata
from storefront.data.database import Base, engine
from storefront.exceptions import StorefrontError
from storefront.utils.logging import get_logger
from storefront.utils.timeutils import utcnow

logger = get_logger(__name__)


def error_body(message: str, error_code: str, details: dict | None = None) -> dict:
    body = {
        "success": False,
        "message": message,
        "timestamp": utcnow().isoformat(),
        "error_code": error_code,
    }
    if details:
        body["details"] = details
    return body


async def storefront_error_handler(request: Request, exc: StorefrontError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_code, exc.details),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid input data", "VALIDATION_ERROR", {"errors": errors}),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "INTERNAL_SERVER_ERROR"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Tabele w Base.metadata: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Nocturne Storefront",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(api_router)

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
