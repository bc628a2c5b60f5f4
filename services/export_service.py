"""
Exportación de convocatorias a CSV (plan Pro)
"""

import logging
from typing import Optional, List

import pandas as pd
from pydantic import BaseModel, Field

from config import has_feature
from models import StoredConvocatoria
from utils.errors import NotFoundError, UpgradeRequiredError

logger = logging.getLogger(__name__)

# Columna interna -> encabezado del CSV
CSV_COLUMNS = {
    "id": "ID",
    "nombre_concurso": "Nombre del Concurso",
    "institucion": "Institución",
    "fecha_cierre": "Fecha de Cierre",
    "fecha_apertura": "Fecha de Apertura",
    "fecha_resultados": "Fecha de Resultados",
    "estado": "Estado",
    "monto_financiamiento": "Monto de Financiamiento",
    "area": "Área",
    "tipo_fondo": "Tipo de Fondo",
    "contacto": "Contacto",
    "sitio_web": "Sitio Web",
    "created_at": "Fecha de Creación",
    "updated_at": "Fecha de Actualización",
}

SORT_COLUMNS = {
    "date": "fecha_cierre",
    "name": "nombre_concurso",
    "institution": "institucion",
}


class ExportFilters(BaseModel):
    status: Optional[str] = None
    organization: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    search: Optional[str] = None


class ExportOptions(BaseModel):
    include_description: bool = False
    include_requirements: bool = False
    sort_by: Optional[str] = Field(None, description="date, name o institution (default: fecha de creación)")
    sort_order: str = "desc"


def records_to_dataframe(
    records: List[StoredConvocatoria],
    filters: Optional[ExportFilters] = None,
    options: Optional[ExportOptions] = None,
) -> pd.DataFrame:
    """Aplica filtros y orden, y retorna el DataFrame con encabezados en español"""
    filters = filters or ExportFilters()
    options = options or ExportOptions()

    columns = list(CSV_COLUMNS.keys()) + ["descripcion", "requisitos"]
    df = pd.DataFrame([r.model_dump() for r in records], columns=columns)

    if filters.status:
        df = df[df["estado"] == filters.status]
    if filters.organization:
        df = df[df["institucion"].fillna("").str.contains(filters.organization, case=False, regex=False)]
    if filters.date_from:
        df = df[df["fecha_cierre"].notna() & (df["fecha_cierre"].fillna("") >= filters.date_from)]
    if filters.date_to:
        df = df[df["fecha_cierre"].notna() & (df["fecha_cierre"].fillna("") <= filters.date_to)]
    if filters.search:
        term = filters.search
        in_name = df["nombre_concurso"].fillna("").str.contains(term, case=False, regex=False)
        in_description = df["descripcion"].fillna("").str.contains(term, case=False, regex=False)
        df = df[in_name | in_description]

    sort_column = SORT_COLUMNS.get(options.sort_by or "", "created_at")
    df = df.sort_values(
        by=sort_column,
        ascending=options.sort_order == "asc",
        na_position="last",
        kind="mergesort",
    )

    selected = dict(CSV_COLUMNS)
    if options.include_description:
        selected["descripcion"] = "Descripción"
    if options.include_requirements:
        selected["requisitos"] = "Requisitos"
    return df[list(selected.keys())].rename(columns=selected).fillna("")


class ExportService:
    """Exporta las convocatorias de un usuario"""

    def __init__(self, persistence):
        self.persistence = persistence

    def export_csv(
        self,
        user_id: str,
        plan_id: Optional[str],
        filters: Optional[ExportFilters] = None,
        options: Optional[ExportOptions] = None,
    ) -> str:
        """
        Raises:
            UpgradeRequiredError: el plan no incluye exportación
            NotFoundError: no hay convocatorias que cumplan los filtros
        """
        if not has_feature(plan_id, "export_features"):
            raise UpgradeRequiredError("La exportación de datos requiere plan Pro")

        records = self.persistence.list_convocatorias(user_id)
        df = records_to_dataframe(records, filters, options)
        if df.empty:
            raise NotFoundError("No se encontraron convocatorias para exportar")

        logger.info(f"Exportando {len(df)} convocatorias a CSV")
        return df.to_csv(index=False)

