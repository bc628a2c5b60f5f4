"""
Utilidades generales
"""

from .date_parser import parse_date, is_past_date, is_iso_date, days_until, to_date, add_months, month_key
from .errors import (
    ConvocatoriasError,
    EmptyContentError,
    InvalidRequestError,
    AuthenticationError,
    UpgradeRequiredError,
    LLMCallFailedError,
    LLMOutputUnparsableError,
    PersistenceError,
    NotFoundError,
    status_for_code,
)

__all__ = [
    "parse_date",
    "is_past_date",
    "is_iso_date",
    "days_until",
    "to_date",
    "add_months",
    "month_key",
    "ConvocatoriasError",
    "EmptyContentError",
    "InvalidRequestError",
    "AuthenticationError",
    "UpgradeRequiredError",
    "LLMCallFailedError",
    "LLMOutputUnparsableError",
    "PersistenceError",
    "NotFoundError",
    "status_for_code",
]
