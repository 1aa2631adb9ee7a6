"""
Entidades de configuracion de la integracion Monday.com.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from dashboard.shared.constants.monday_constants import Section, SyncStatus


@dataclass
class MondayBoardConfig:
    """Board observado por la sincronizacion."""

    board_id: str
    target_section: Section = Section.PIPELINE
    board_name: Optional[str] = None
    is_active: bool = True
    display_order: int = 0
    id: Optional[int] = None


@dataclass
class ColumnMapping:
    """Columna externa -> campo interno de la seccion del board."""

    monday_column_id: str
    pipeline_field: str
    monday_column_title: Optional[str] = None
    display_label: Optional[str] = None
    display_order: int = 0
    is_visible: bool = True


@dataclass
class SyncLogEntry:
    """Entrada del log de corridas (una por board y corrida)."""

    id: int
    board_id: str
    status: SyncStatus
    target_section: Optional[str] = None
    items_synced: int = 0
    items_created: int = 0
    items_updated: int = 0
    error_message: Optional[str] = None
    triggered_by: Optional[int] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
