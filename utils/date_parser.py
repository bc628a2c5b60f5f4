"""
Utilidades para parsing y procesamiento de fechas
"""

import math
import re
from datetime import datetime, date
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from typing import Optional, Union

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MONTHS_ES = {
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4,
    "mayo": 5, "junio": 6, "julio": 7, "agosto": 8,
    "septiembre": 9, "setiembre": 9, "octubre": 10, "noviembre": 11, "diciembre": 12
}


def is_iso_date(date_str: Optional[str]) -> bool:
    """
    True si el texto tiene formato YYYY-MM-DD y es una fecha de calendario real
    """
    if not date_str or not isinstance(date_str, str):
        return False
    date_str = date_str.strip()
    if not ISO_DATE_RE.match(date_str):
        return False
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
        return True
    except ValueError:
        return False


def parse_date(date_str: str) -> Optional[datetime]:
    """
    Intenta parsear una fecha en varios formatos comunes en Chile

    Args:
        date_str: String con la fecha

    Returns:
        datetime object o None si no se puede parsear
    """
    if not date_str or not isinstance(date_str, str):
        return None

    date_str = date_str.strip()

    # Formato YYYY-MM-DD (o timestamp ISO): parsear directamente, sin dayfirst
    if re.match(r'^\d{4}-\d{1,2}-\d{1,2}', date_str):
        try:
            parsed = date_parser.isoparse(date_str)
            return parsed.replace(tzinfo=None)
        except ValueError:
            pass

    # "10 de diciembre, 2025" o "15 de marzo de 2024"
    match_es = re.search(r"(\d{1,2})\s+de\s+([a-záéíóú]+)\s*(?:,|de)?\s*(\d{4})", date_str, re.IGNORECASE)
    if match_es:
        month = MONTHS_ES.get(match_es.group(2).lower())
        if month:
            try:
                return datetime(int(match_es.group(3)), month, int(match_es.group(1)))
            except ValueError:
                return None

    # DD/MM/YYYY o DD-MM-YYYY
    match_num = re.search(r"(\d{1,2})[\/\-](\d{1,2})[\/\-](\d{4})", date_str)
    if match_num:
        try:
            return datetime(int(match_num.group(3)), int(match_num.group(2)), int(match_num.group(1)))
        except ValueError:
            return None

    # dateutil como último recurso (muy flexible)
    try:
        return date_parser.parse(date_str, dayfirst=True).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None


def to_date(value: Union[str, datetime, date, None]) -> Optional[date]:
    """Convierte texto o datetime a date (None si no es interpretable)"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(value)
    return parsed.date() if parsed else None


def is_past_date(date_str: str, today: Optional[date] = None) -> bool:
    """
    Determina si una fecha es pasada

    Args:
        date_str: String con la fecha
        today: Fecha de referencia (default: hoy)

    Returns:
        True si la fecha es anterior a hoy, False si es hoy, futura o no se puede determinar
    """
    parsed = to_date(date_str)
    if parsed is None:
        return False
    return parsed < (today or date.today())


def days_until(target: Union[str, date, None], now: datetime) -> Optional[int]:
    """
    Días (redondeados hacia arriba) desde `now` hasta el inicio del día objetivo.

    Un plazo de hoy mismo en la tarde retorna 0; uno de mañana, 1.
    """
    target_date = to_date(target)
    if target_date is None:
        return None
    target_dt = datetime(target_date.year, target_date.month, target_date.day)
    return math.ceil((target_dt - now).total_seconds() / 86400)


def add_months(value: datetime, months: int) -> datetime:
    """Suma meses respetando fin de mes (31-ene + 1 mes = 28/29-feb)"""
    return value + relativedelta(months=months)


def month_key(value: Union[datetime, date]) -> str:
    """Clave de mes YYYY-MM"""
    return f"{value.year:04d}-{value.month:02d}"
