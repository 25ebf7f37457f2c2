import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiptrack.core.config import Settings, get_settings
from shiptrack.core.logging_config import setup_logging
from shiptrack.repositories.json_storage import ShipmentStore
from shiptrack.routers import health as health_router
from shiptrack.routers import shipments as shipments_router
from shiptrack.services.shipment_service import ShipmentService

logger = logging.getLogger(__name__)


async def _invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Unparseable bodies answer like a record missing its fields.
    logger.info("Rejected body on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": "Missing required fields"}, status_code=400)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app bound to one store file; compatible with uvicorn --factory."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title="Shipment Tracking API")
    app.state.settings = settings
    app.state.shipment_service = ShipmentService(ShipmentStore(settings.data_file))

    origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _invalid_body_handler)

    app.include_router(health_router.router)
    app.include_router(shipments_router.router)
    return app


app = create_app()
