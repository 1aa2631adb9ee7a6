"""
Conversión item de Monday.com -> fila interna de una sección.

Reglas:
- Un texto visible vacío nunca pisa un valor: la columna se ignora.
- Montos y fechas que no se pueden interpretar quedan en None, sin lanzar.
- Campos mapeados fuera del whitelist de la sección se descartan.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from loguru import logger

from dashboard.domain.entities.monday_rows import ROW_TYPE_BY_SECTION, UNSET, MondayRow
from dashboard.shared.constants.monday_constants import Section
from dashboard.shared.utils.value_parsers import (
    extract_date_text,
    normalize_name,
    parse_date,
    parse_money,
)

from .client import MondayClient
from .field_registry import (
    ASSIGNED_ID_FIELD,
    ASSIGNED_NAME_FIELD,
    DEFAULT_REGISTRY,
    FieldRegistry,
)
from .types import MondayColumnValue, MondayItem


DEFAULT_ITEM_NAME = "Unnamed"


@dataclass(frozen=True)
class ColumnMappingSuggestion:
    monday_column_id: str
    pipeline_field: str
    title: str = ""


def _convert_value(
    field_name: str,
    cv: MondayColumnValue,
    text: str,
    registry: FieldRegistry,
) -> Any:
    if field_name in registry.money_fields:
        return parse_money(text)
    if field_name in registry.date_fields:
        return parse_date(extract_date_text(cv.value, text))
    return text


def map_item_to_row(
    item: MondayItem,
    column_map: Mapping[str, str],
    name_to_user_id: Mapping[str, int],
    section: Section = Section.PIPELINE,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> MondayRow:
    """
    Convierte un item en la variante de fila de la sección.

    Args:
        item: Item tal cual llegó de la API
        column_map: monday_column_id -> campo interno
        name_to_user_id: nombre normalizado -> id de usuario interno
        section: Sección destino
        registry: Registro de campos (inyectable en tests)
    """
    section = Section(section)
    row_cls = ROW_TYPE_BY_SECTION[section]
    allowed = set(registry.fields_for(section))
    group_field = registry.group_field.get(section)

    values: dict[str, Any] = {
        "client_name": (item.name or "").strip() or DEFAULT_ITEM_NAME,
    }

    if item.group_title and group_field:
        values[group_field] = item.group_title

    for cv in item.column_values:
        field_name = column_map.get(cv.id)
        if not field_name:
            continue
        if field_name not in allowed:
            logger.debug(f"Campo '{field_name}' no pertenece a la seccion {section.value}, se descarta")
            continue

        text = (cv.text or "").strip()
        if not text:
            continue

        if field_name == ASSIGNED_NAME_FIELD:
            values[ASSIGNED_NAME_FIELD] = text
            user_id = name_to_user_id.get(normalize_name(text))
            if user_id is not None:
                values[ASSIGNED_ID_FIELD] = user_id
            continue

        values[field_name] = _convert_value(field_name, cv, text, registry)

    if section in registry.zero_amount_sections and "loan_amount" not in values:
        values["loan_amount"] = Decimal(0)

    status_default = registry.status_default.get(section)
    if group_field and status_default is not None and not values.get(group_field):
        values[group_field] = status_default

    known = row_cls.field_names()
    return row_cls(
        monday_item_id=str(item.id),
        **{k: v for k, v in values.items() if k in known and v is not UNSET},
    )


def auto_map_columns(
    client: MondayClient,
    board_id: str,
    section: Optional[Section] = None,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> list[ColumnMappingSuggestion]:
    """
    Deriva un mapeo a partir de los títulos de columna del board.

    Las columnas sin coincidencia se descartan en silencio; un mapeo
    parcial (o vacío) es un resultado válido.
    """
    suggestions: list[ColumnMappingSuggestion] = []
    for column in client.fetch_board_columns(board_id):
        field_name = registry.suggest_field(column.title, section)
        if field_name:
            suggestions.append(
                ColumnMappingSuggestion(
                    monday_column_id=column.id,
                    pipeline_field=field_name,
                    title=column.title,
                )
            )

    logger.debug(f"Board {board_id}: {len(suggestions)} columna(s) auto-mapeadas")
    return suggestions
