"""
API HTTP de ConvocatoriasPro

Uso:
    uvicorn api.app:create_app --factory --port 8000
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from api.schemas import AlertsRequest, ConvocatoriaRequest, CurrentUser, ExportRequest, ParseRequest, SyncRequest
from api.security import require_ai_plan, require_user
from config import load_llm_credentials
from llm import LLMGateway, create_gateway
from models import Convocatoria, PaymentNotification, RawInput, SavedSearch
from services import (
    AlertService,
    CalendarService,
    DashboardService,
    EnrichmentService,
    ExportService,
    ParsingService,
    SavedSearchService,
    SubscriptionService,
    SyncService,
    ValidationService,
)
from storage import SupabaseClient
from utils.errors import ConvocatoriasError, InvalidRequestError, LLMCallFailedError, status_for_code

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Dependencias de la API, construidas una vez por aplicación"""
    persistence: Any
    gateway: Optional[LLMGateway] = None
    clock: Callable[[], datetime] = datetime.now
    sync: Optional[SyncService] = field(default=None)

    def __post_init__(self):
        # El servicio de sincronización recuerda las operaciones aplicadas
        if self.sync is None:
            self.sync = SyncService(self.persistence)

    @classmethod
    def from_env(cls) -> "AppServices":
        persistence = SupabaseClient.from_env()
        credentials = load_llm_credentials()
        gateway = None
        if credentials["api_key"]:
            gateway = create_gateway(credentials["provider"], credentials["api_key"], credentials["model"])
        else:
            logger.warning(f"⚠️ Sin API key para {credentials['provider']}: las funciones de IA no estarán disponibles")
        return cls(persistence=persistence, gateway=gateway)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _error_response(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    body = {"error": {"code": code, "message": message}}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _candidate_from(body: ConvocatoriaRequest) -> Convocatoria:
    if not body.convocatoria:
        raise InvalidRequestError("No se proporcionó datos de convocatoria")
    return Convocatoria.model_validate(body.convocatoria)


def create_app(services: Optional[AppServices] = None) -> FastAPI:
    """
    Construye la aplicación con sus dependencias.

    Args:
        services: Dependencias inyectadas (default: construidas desde variables de entorno)
    """
    configure_logging()
    services = services or AppServices.from_env()

    app = FastAPI(title="ConvocatoriasPro API", version="1.0.0")
    app.state.services = services

    # ====== Manejo de errores ======
    @app.exception_handler(ConvocatoriasError)
    def convocatorias_error_handler(request: Request, exc: ConvocatoriasError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.url.path}: {exc.code} - {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, InvalidRequestError.code, f"Cuerpo de la petición inválido: {exc.errors()}")

    @app.exception_handler(Exception)
    def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Error no controlado en {request.url.path}: {exc}")
        return _error_response(500, "INTERNAL_ERROR", "Error interno del servidor")

    # ====== Health ======
    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "ok"

    # ====== Pipeline de IA ======
    @app.post("/parse-content")
    def parse_content(body: ParseRequest, user: CurrentUser = Depends(require_user)):
        require_ai_plan(user)
        if services.gateway is None:
            raise LLMCallFailedError("No hay proveedor de IA configurado")

        outcome = ParsingService(services.gateway).parse(
            RawInput(content=body.content, source_kind=body.source, mime_hint=body.fileType)
        )
        content = outcome.model_dump()
        if outcome.error_code:
            content["error"] = {
                "code": outcome.error_code,
                "message": outcome.errors[0] if outcome.errors else (outcome.message or ""),
            }
            return JSONResponse(status_code=status_for_code(outcome.error_code), content=content)
        return content

    @app.post("/validate-convocatoria")
    def validate_convocatoria(body: ConvocatoriaRequest, user: CurrentUser = Depends(require_user)):
        require_ai_plan(user)
        candidate = _candidate_from(body)
        outcome = ValidationService(services.gateway).validate(candidate)
        return outcome.model_dump(by_alias=True)

    @app.post("/enhance-preview")
    def enhance_preview(body: ConvocatoriaRequest, user: CurrentUser = Depends(require_user)):
        candidate = Convocatoria.model_validate(body.convocatoria or {})
        result = EnrichmentService(services.gateway).enrich(candidate, user.plan)
        return result.model_dump()

    # ====== Dashboard y calendario ======
    @app.get("/dashboard-stats")
    def dashboard_stats(user: CurrentUser = Depends(require_user)):
        stats = DashboardService(services.persistence, clock=services.clock).get_stats(user.id, user.plan)
        return {"data": stats.model_dump()}

    @app.get("/calendar-events")
    def calendar_events(view: str = "month", month: Optional[str] = None, user: CurrentUser = Depends(require_user)):
        data = CalendarService(services.persistence, clock=services.clock).get_events(user.id, view, month)
        return {"data": data}

    # ====== Sincronización y exportación ======
    @app.post("/background-sync")
    def background_sync(body: SyncRequest, user: CurrentUser = Depends(require_user)):
        report = services.sync.sync(user.id, body.pending_operations)
        return {"data": report.model_dump()}

    @app.post("/save-search")
    def save_search(body: SavedSearch, user: CurrentUser = Depends(require_user)):
        saved = SavedSearchService(services.persistence).save(user.id, body)
        return {"data": {"saved_search": saved, "message": "Búsqueda guardada exitosamente"}}

    @app.post("/export-data")
    def export_data(body: ExportRequest, user: CurrentUser = Depends(require_user)):
        csv_text = ExportService(services.persistence).export_csv(user.id, user.plan, body.filters, body.options)
        filename = f"convocatorias_{services.clock().strftime('%Y-%m-%d')}.csv"
        return PlainTextResponse(
            csv_text,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    # ====== Alertas de vencimiento ======
    @app.post("/deadline-alerts")
    def deadline_alerts(body: AlertsRequest, user: CurrentUser = Depends(require_user)):
        alerts = AlertService(services.persistence, clock=services.clock)
        scheduled = alerts.schedule(user.id, body.preferences)
        due = alerts.pending(user.id)
        return {"data": {
            "scheduled": [a.model_dump() for a in scheduled],
            "due": [a.model_dump() for a in due],
        }}

    # ====== Pagos ======
    @app.post("/mp-webhook")
    def mp_webhook(notification: PaymentNotification):
        # Lo invoca el proveedor de pagos, no un usuario con sesión
        return SubscriptionService(services.persistence).handle_notification(notification)

    return app


def main():
    import uvicorn

    uvicorn.run("api.app:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
