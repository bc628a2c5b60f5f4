"""
Búsquedas guardadas con nombre
"""

import logging
import uuid
from typing import Any, Dict

from models import SavedSearch
from utils.errors import InvalidRequestError

logger = logging.getLogger(__name__)

SAVED_SEARCHES_TABLE = "saved_searches"


class SavedSearchService:
    """Guarda búsquedas de un usuario; el nombre es único por usuario"""

    def __init__(self, persistence):
        self.persistence = persistence

    def save(self, user_id: str, search: SavedSearch) -> Dict[str, Any]:
        """
        Raises:
            InvalidRequestError: nombre o consulta vacíos, o nombre repetido
        """
        name = (search.search_name or "").strip()
        query = (search.original_query or "").strip()
        if not name:
            raise InvalidRequestError("El nombre de la búsqueda es requerido")
        if not query:
            raise InvalidRequestError("La consulta original es requerida")

        if self.persistence.list_rows(SAVED_SEARCHES_TABLE, {"user_id": user_id, "search_name": name}):
            raise InvalidRequestError("Ya existe una búsqueda guardada con ese nombre")

        row = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "search_name": name,
            "original_query": query,
            "search_parameters": search.search_parameters,
            "is_favorite": search.is_favorite,
            "last_run": None,
        }
        rows = self.persistence.insert_row(SAVED_SEARCHES_TABLE, row)
        logger.info(f"💾 Búsqueda '{name}' guardada para {user_id}")
        return rows[0] if rows else row
