"""
Integración de solo lectura Monday.com -> tablas internas.

- client: GraphQL sobre requests, rechaza cualquier mutation
- field_registry: whitelists, etiquetas y mapeo por título (inmutables)
- mapper: item -> fila de la sección, sin I/O
"""

from .client import MondayClient, ensure_read_only
from .field_registry import DEFAULT_REGISTRY, FieldRegistry
from .mapper import ColumnMappingSuggestion, auto_map_columns, map_item_to_row
from .types import MondayBoard, MondayColumn, MondayColumnValue, MondayCredentials, MondayItem

__all__ = [
    "ColumnMappingSuggestion",
    "DEFAULT_REGISTRY",
    "FieldRegistry",
    "MondayBoard",
    "MondayClient",
    "MondayColumn",
    "MondayColumnValue",
    "MondayCredentials",
    "MondayItem",
    "auto_map_columns",
    "ensure_read_only",
    "map_item_to_row",
]
