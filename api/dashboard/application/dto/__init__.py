"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .monday_dto import (
    BoardColumnDTO,
    BoardColumnsResponseDTO,
    ColumnMappingDTO,
    ColumnMappingsUpdateDTO,
    ConnectionTestDTO,
    MondayBoardDTO,
    SectionFieldsDTO,
    SyncLogEntryDTO,
    SyncRunSummaryDTO,
)

__all__ = [
    "BoardColumnDTO",
    "BoardColumnsResponseDTO",
    "ColumnMappingDTO",
    "ColumnMappingsUpdateDTO",
    "ConnectionTestDTO",
    "MondayBoardDTO",
    "SectionFieldsDTO",
    "SyncLogEntryDTO",
    "SyncRunSummaryDTO",
]
