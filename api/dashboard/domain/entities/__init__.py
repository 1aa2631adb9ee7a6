"""
Entidades del dominio.
"""
from dashboard.domain.entities.monday_board import ColumnMapping, MondayBoardConfig, SyncLogEntry
from dashboard.domain.entities.monday_rows import (
    UNSET,
    FundedLoanRow,
    MondayRow,
    PipelineRow,
    PreApprovalRow,
    ROW_TYPE_BY_SECTION,
    SectionRow,
)

__all__ = [
    "ColumnMapping",
    "MondayBoardConfig",
    "SyncLogEntry",
    "UNSET",
    "FundedLoanRow",
    "MondayRow",
    "PipelineRow",
    "PreApprovalRow",
    "ROW_TYPE_BY_SECTION",
    "SectionRow",
]
