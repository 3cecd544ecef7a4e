import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftpay.routes import reports, settings, shifts, transfer


def _configure_logging() -> None:
    level_name = (os.getenv("SHIFTPAY_LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("shiftpay").setLevel(level)


def create_app() -> FastAPI:
    _configure_logging()
    app = FastAPI(title="Shiftpay Timesheet API", version="0.1.0")

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(settings.router, prefix="/api")
    app.include_router(shifts.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")
    app.include_router(transfer.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Shiftpay Timesheet API",
                "docs": "/docs",
            }
        )

    return app


app = create_app()
