"""
Parsers puros para valores que vienen de boards externos.

Ninguna funcion de este modulo lanza excepciones: un valor que no se puede
interpretar se devuelve como None y la fila sigue su curso.
"""
import json
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


_MONEY_STRIP_RE = re.compile(r"[$,\s]")

# Fecha ISO seguida opcionalmente de hora y offset validos
_ISO_DATETIME_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)

# Formatos aceptados ademas de ISO 8601
_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y", "%b %d, %Y", "%B %d, %Y")


def parse_money(text: Optional[str]) -> Optional[Decimal]:
    """
    Convierte un texto monetario ("$1,250,000.00") a Decimal.

    Retorna None si el texto no representa un numero finito.
    """
    if text is None:
        return None
    cleaned = _MONEY_STRIP_RE.sub("", str(text))
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Interpreta un texto como fecha real.

    Acepta ISO 8601 (fecha o fecha-hora, con o sin 'Z') y los formatos
    de _DATE_FORMATS. Retorna None si no es una fecha valida.
    """
    if not text or not isinstance(text, str):
        return None
    candidate = text.strip()
    if not candidate:
        return None

    try:
        return datetime.fromisoformat(candidate.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    match = _ISO_DATETIME_RE.match(candidate)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    return None


def extract_date_text(raw_value: Optional[str], display_text: str) -> Optional[str]:
    """
    Obtiene el texto de fecha de una columna de tipo fecha.

    El valor crudo suele ser JSON ({"date": "2024-01-15", ...}). Si el JSON
    no parsea o no trae la sub-clave 'date', se usa el texto visible.
    """
    if raw_value:
        try:
            parsed: Any = json.loads(raw_value)
        except (ValueError, TypeError):
            return display_text
        if isinstance(parsed, dict):
            inner = parsed.get("date")
            if isinstance(inner, str) and inner.strip():
                return inner
        elif isinstance(parsed, str) and parsed.strip():
            return parsed
    return display_text


def normalize_name(name: Optional[str]) -> str:
    """Normaliza un nombre para comparacion exacta (minusculas, sin bordes)."""
    return (name or "").strip().lower()
