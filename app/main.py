import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from peewee import PeeweeException

from core.app_context import AppContext, get_app_context
from infrastructure.address_gateway import AddressLookupError
from services.ai_summary_service import SummaryError
from services.errors import RecordNotFoundError, ValidationError
from services.orders.inspection import AnnotatorError

from .api.router import router as api_router
from .web.router import router as web_router

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = "Não foi possível acessar os dados. Tente novamente em instantes."


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PeeweeException)
    async def store_error(request: Request, exc: PeeweeException):
        logger.exception("❌ Store failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=503, content={"detail": STORE_UNAVAILABLE})

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": exc.errors})

    @app.exception_handler(RecordNotFoundError)
    async def not_found(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(AnnotatorError)
    async def annotator_error(request: Request, exc: AnnotatorError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(AddressLookupError)
    @app.exception_handler(SummaryError)
    async def upstream_error(request: Request, exc: Exception):
        logger.error("Upstream failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})


def create_app(context: AppContext | None = None) -> FastAPI:
    app = FastAPI(title="Endos Manager")
    app.state.context = context or get_app_context()
    _register_error_handlers(app)
    app.include_router(api_router, prefix="/api")
    app.include_router(web_router)

    @app.get("/ping")
    def ping():
        return {"message": "pong"}

    return app
