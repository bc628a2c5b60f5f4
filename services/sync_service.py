"""
Sincronización de operaciones pendientes creadas sin conexión

Cola FIFO con entrega al menos una vez: el cliente reenvía lo que no
se confirmó y el id de cada operación evita aplicarla dos veces.
"""

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from config import SYNC_CONFIG
from models import PendingOperation, SyncItemResult, SyncReport
from utils.errors import ConvocatoriasError, InvalidRequestError

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PendingOperationQueue:
    """Cola FIFO de operaciones indexada por id de operación"""

    def __init__(self):
        self._items: "OrderedDict[str, PendingOperation]" = OrderedDict()

    def enqueue(self, operation: PendingOperation) -> bool:
        """
        Agrega una operación al final de la cola.

        Returns:
            False si ya había una operación con el mismo id (no se agrega)
        """
        if operation.id in self._items:
            logger.debug(f"Operación {operation.id} ya estaba en cola")
            return False
        self._items[operation.id] = operation
        return True

    def drain(self) -> List[PendingOperation]:
        """Retorna las operaciones en orden de llegada y vacía la cola"""
        items = list(self._items.values())
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, operation_id: str) -> bool:
        return operation_id in self._items


class SyncService:
    """
    Aplica operaciones pendientes contra el almacenamiento, una por una.

    Una falla se registra y no detiene las siguientes operaciones. Los ids
    ya aplicados se recuerdan por usuario para que un reenvío no genere una
    segunda escritura. Cada usuario tiene su propia cola; el servicio se
    comparte entre peticiones concurrentes de la API.
    """

    def __init__(self, persistence, clock: Optional[Callable[[], str]] = None, config: Optional[Dict[str, Any]] = None):
        self.persistence = persistence
        self.clock = clock or _utc_now_iso
        self.config = config or SYNC_CONFIG
        self._lock = threading.Lock()
        self._queues: Dict[str, PendingOperationQueue] = {}
        # (user_id, id de operación) aplicados, del más antiguo al más reciente
        self._applied: "OrderedDict[Tuple[str, str], None]" = OrderedDict()
        self._in_flight: Set[Tuple[str, str]] = set()
        self._handlers = {
            "save_convocatoria": self._save_convocatoria,
            "update_convocatoria": self._update_convocatoria,
            "save_search": self._save_search,
            "track_analytics": self._track_analytics,
            "update_settings": self._update_settings,
        }

    def enqueue(self, user_id: str, operation: PendingOperation) -> bool:
        """Agrega una operación a la cola del usuario (False si el id ya estaba en cola)"""
        with self._lock:
            queue = self._queues.setdefault(user_id, PendingOperationQueue())
            return queue.enqueue(operation)

    def sync(self, user_id: str, operations: Iterable[PendingOperation]) -> SyncReport:
        """Procesa en orden las operaciones recibidas en una petición"""
        queue = PendingOperationQueue()
        for operation in operations:
            queue.enqueue(operation)
        return self._process_all(user_id, queue.drain())

    def flush(self, user_id: str) -> SyncReport:
        """
        Procesa la cola completa del usuario en orden FIFO.

        Returns:
            SyncReport con el resultado de cada operación
        """
        with self._lock:
            queue = self._queues.pop(user_id, None)
        return self._process_all(user_id, queue.drain() if queue else [])

    def is_applied(self, user_id: str, operation_id: str) -> bool:
        with self._lock:
            return (user_id, operation_id) in self._applied

    def _process_all(self, user_id: str, operations: List[PendingOperation]) -> SyncReport:
        logger.info(f"Sincronizando {len(operations)} operaciones pendientes de {user_id}")
        report = SyncReport(total_operations=len(operations))

        for operation in operations:
            item = self._process(user_id, operation)
            report.items.append(item)
            if item.status in ("success", "duplicate"):
                report.processed_successfully += 1
                report.clear_from_client.append(operation.id)
            elif item.status == "skipped":
                report.clear_from_client.append(operation.id)
            else:
                report.failed += 1

        logger.info(
            f"Sincronización terminada: {report.processed_successfully} ok, "
            f"{report.failed} con error, {report.total_operations} en total"
        )
        return report

    def _process(self, user_id: str, operation: PendingOperation) -> SyncItemResult:
        key = (user_id, operation.id)
        with self._lock:
            if key in self._applied or key in self._in_flight:
                logger.info(f"Operación {operation.id} ya aplicada, se omite la escritura")
                return self._item(operation, "duplicate")

            handler = self._handlers.get(operation.type)
            if handler is None or operation.type not in self.config["supported_operations"]:
                logger.warning(f"Tipo de operación no soportado: {operation.type}")
                return self._item(operation, "skipped", error="Tipo de operación no soportado")
            self._in_flight.add(key)

        try:
            result = handler(user_id, operation)
        except ConvocatoriasError as e:
            logger.error(f"❌ Error procesando operación {operation.id} ({operation.type}): {e.message}")
            with self._lock:
                self._in_flight.discard(key)
            return self._item(operation, "error", error=e.message)

        with self._lock:
            self._in_flight.discard(key)
            self._remember(key)
        return self._item(operation, "success", result=result)

    def _remember(self, key: Tuple[str, str]) -> None:
        """Registra un id aplicado descartando los más antiguos sobre el límite"""
        self._applied[key] = None
        limit = self.config.get("applied_ids_limit", 10000)
        while len(self._applied) > limit:
            self._applied.popitem(last=False)

    def _item(self, operation: PendingOperation, status: str, result: Any = None, error: Optional[str] = None) -> SyncItemResult:
        return SyncItemResult(
            id=operation.id,
            type=operation.type,
            status=status,
            result=result,
            error=error,
            processed_at=self.clock(),
        )

    def _save_convocatoria(self, user_id: str, operation: PendingOperation):
        row = dict(operation.data)
        row.update({
            "user_id": user_id,
            "created_at": operation.timestamp or self.clock(),
            "updated_at": self.clock(),
        })
        return self.persistence.insert_convocatoria(row)

    def _update_convocatoria(self, user_id: str, operation: PendingOperation):
        data = dict(operation.data)
        convocatoria_id = data.pop("id", None)
        if convocatoria_id is None:
            raise InvalidRequestError("La actualización no indica el id de la convocatoria")
        data["updated_at"] = self.clock()
        return self.persistence.update_convocatoria(str(convocatoria_id), user_id, data)

    def _save_search(self, user_id: str, operation: PendingOperation):
        data = operation.data
        return self.persistence.insert_row("ai_searches", {
            "user_id": user_id,
            "query": data.get("query"),
            "filters": data.get("filters"),
            "results_count": data.get("results_count") or 0,
            "created_at": operation.timestamp or self.clock(),
        })

    def _track_analytics(self, user_id: str, operation: PendingOperation):
        data = operation.data
        return self.persistence.insert_row("user_analytics", {
            "user_id": user_id,
            "event_type": data.get("event_type"),
            "event_data": data.get("event_data"),
            "page_url": data.get("page_url"),
            "user_agent": data.get("user_agent"),
            "created_at": operation.timestamp or self.clock(),
        })

    def _update_settings(self, user_id: str, operation: PendingOperation):
        data = dict(operation.data)
        data["updated_at"] = self.clock()
        return self.persistence.update_rows("user_settings", {"user_id": user_id}, data)
