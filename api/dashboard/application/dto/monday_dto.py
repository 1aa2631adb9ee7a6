"""
DTOs de la integracion Monday.com.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from dashboard.shared.constants.monday_constants import Section, SyncStatus


class SyncRunSummaryDTO(BaseModel):
    """Totales de una corrida completa de sincronizacion."""
    boards: int = Field(..., description="Boards activos al inicio de la corrida")
    items_fetched: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0


class SyncLogEntryDTO(BaseModel):
    """Entrada del log de corridas."""
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

    class Config:
        from_attributes = True


class MondayBoardDTO(BaseModel):
    """Configuracion de un board observado."""
    board_id: str = Field(..., min_length=1, description="ID del board en Monday.com")
    board_name: Optional[str] = None
    target_section: Section = Section.PIPELINE
    is_active: bool = True
    display_order: int = 0

    class Config:
        from_attributes = True


class ColumnMappingDTO(BaseModel):
    """Columna externa -> campo interno."""
    monday_column_id: str = Field(..., min_length=1)
    pipeline_field: str = Field(..., min_length=1, description="Campo interno de la seccion del board")
    monday_column_title: Optional[str] = None
    display_label: Optional[str] = None
    display_order: int = 0
    is_visible: bool = True

    class Config:
        from_attributes = True


class ColumnMappingsUpdateDTO(BaseModel):
    """Reemplazo completo de los mapeos de un board."""
    mappings: List[ColumnMappingDTO] = Field(default_factory=list)


class BoardColumnDTO(BaseModel):
    """Columna del board con el campo sugerido por su titulo."""
    id: str
    title: str
    type: Optional[str] = None
    suggested_field: Optional[str] = None


class BoardColumnsResponseDTO(BaseModel):
    board_id: str
    board_name: Optional[str] = None
    section: Section
    columns: List[BoardColumnDTO] = Field(default_factory=list)
    valid_fields: List[str] = Field(default_factory=list)
    field_labels: Dict[str, str] = Field(default_factory=dict)


class SectionFieldsDTO(BaseModel):
    """Campos mapeables de una seccion y sus etiquetas."""
    section: Section
    fields: List[str]
    labels: Dict[str, str]


class ConnectionTestDTO(BaseModel):
    success: bool
    message: str
