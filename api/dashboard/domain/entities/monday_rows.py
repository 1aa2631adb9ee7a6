"""
Filas internas producidas por el mapper de Monday.com.

Una variante por sección destino. Cada campo arranca en UNSET: un campo
UNSET no se escribe en la base (ni en insert ni en update), mientras que
un campo en None sí se escribe como NULL.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, TypeVar, Union

from dashboard.shared.constants.monday_constants import Section


class _Unset:
    """Marca de campo ausente (distinto de None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

T = TypeVar("T")
Maybe = Union[T, None, _Unset]


@dataclass
class SectionRow:
    """Base común: identificador externo + serialización a columnas."""

    section: ClassVar[Section]

    monday_item_id: str

    def to_columns(self) -> dict[str, Any]:
        """Campos presentes (no UNSET), sin monday_item_id."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "monday_item_id" and getattr(self, f.name) is not UNSET
        }

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if f.name != "monday_item_id")


@dataclass
class PipelineRow(SectionRow):
    section: ClassVar[Section] = Section.PIPELINE

    client_name: Maybe[str] = UNSET
    stage: Maybe[str] = UNSET
    loan_number: Maybe[str] = UNSET
    lender: Maybe[str] = UNSET
    subject_property: Maybe[str] = UNSET
    loan_amount: Maybe[Decimal] = UNSET
    rate: Maybe[str] = UNSET
    appraisal_status: Maybe[str] = UNSET
    loan_purpose: Maybe[str] = UNSET
    loan_type: Maybe[str] = UNSET
    occupancy: Maybe[str] = UNSET
    title_status: Maybe[str] = UNSET
    hoi_status: Maybe[str] = UNSET
    loan_estimate: Maybe[str] = UNSET
    application_date: Maybe[date] = UNSET
    lock_expiration_date: Maybe[date] = UNSET
    closing_date: Maybe[date] = UNSET
    funding_date: Maybe[date] = UNSET
    notes: Maybe[str] = UNSET
    prelims_status: Maybe[str] = UNSET
    mini_set_status: Maybe[str] = UNSET
    cd_status: Maybe[str] = UNSET
    assigned_lo_name: Maybe[str] = UNSET
    assigned_lo_id: Maybe[int] = UNSET


@dataclass
class PreApprovalRow(SectionRow):
    section: ClassVar[Section] = Section.PRE_APPROVALS

    client_name: Maybe[str] = UNSET
    status: Maybe[str] = UNSET
    loan_amount: Maybe[Decimal] = UNSET
    pre_approval_date: Maybe[date] = UNSET
    expiration_date: Maybe[date] = UNSET
    property_address: Maybe[str] = UNSET
    loan_type: Maybe[str] = UNSET
    notes: Maybe[str] = UNSET
    assigned_lo_name: Maybe[str] = UNSET
    assigned_lo_id: Maybe[int] = UNSET


@dataclass
class FundedLoanRow(SectionRow):
    section: ClassVar[Section] = Section.FUNDED_LOANS

    client_name: Maybe[str] = UNSET
    group_name: Maybe[str] = UNSET
    loan_amount: Maybe[Decimal] = UNSET
    loan_type: Maybe[str] = UNSET
    funded_date: Maybe[date] = UNSET
    investor: Maybe[str] = UNSET
    property_address: Maybe[str] = UNSET
    assigned_lo_name: Maybe[str] = UNSET
    assigned_lo_id: Maybe[int] = UNSET


MondayRow = Union[PipelineRow, PreApprovalRow, FundedLoanRow]

ROW_TYPE_BY_SECTION: dict[Section, type[SectionRow]] = {
    Section.PIPELINE: PipelineRow,
    Section.PRE_APPROVALS: PreApprovalRow,
    Section.FUNDED_LOANS: FundedLoanRow,
}
