"""
Registro de campos por sección (Monday.com -> tablas internas).

Este módulo no realiza I/O: solo define configuración estática e inmutable.
Se inyecta al mapper (DEFAULT_REGISTRY) en vez de leerse como global, para
poder testear el mapper con registros alternativos.

Cada sección tiene su propio whitelist de campos mapeables. Algunos nombres
se repiten entre secciones (loan_amount, loan_type, ...), pero los conjuntos
no son iguales.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from dashboard.shared.constants.monday_constants import Section


VALID_PIPELINE_FIELDS: tuple[str, ...] = (
    "loan_number", "lender", "subject_property",
    "loan_amount", "rate", "appraisal_status", "loan_purpose",
    "loan_type", "occupancy", "title_status", "hoi_status",
    "loan_estimate", "application_date", "lock_expiration_date",
    "closing_date", "funding_date", "stage", "notes",
    "prelims_status", "mini_set_status", "cd_status",
    "assigned_lo_name",
)

VALID_PRE_APPROVAL_FIELDS: tuple[str, ...] = (
    "client_name", "loan_amount", "pre_approval_date", "expiration_date",
    "status", "assigned_lo_name", "property_address", "loan_type", "notes",
)

VALID_FUNDED_LOAN_FIELDS: tuple[str, ...] = (
    "assigned_lo_name", "loan_amount", "loan_type",
    "funded_date", "investor", "property_address",
)

VALID_FIELDS_BY_SECTION: Mapping[Section, tuple[str, ...]] = MappingProxyType({
    Section.PIPELINE: VALID_PIPELINE_FIELDS,
    Section.PRE_APPROVALS: VALID_PRE_APPROVAL_FIELDS,
    Section.FUNDED_LOANS: VALID_FUNDED_LOAN_FIELDS,
})

FIELD_LABELS: Mapping[str, str] = MappingProxyType({
    "client_name": "Client Name",
    "loan_number": "Loan #",
    "lender": "Lender",
    "subject_property": "Subject Property",
    "assigned_lo_name": "Loan Officer",
    "loan_amount": "Loan Amount",
    "rate": "Rate",
    "appraisal_status": "Appraisal",
    "loan_purpose": "Loan Purpose",
    "loan_type": "Loan Type",
    "occupancy": "Occupancy",
    "title_status": "Title",
    "hoi_status": "HOI",
    "loan_estimate": "Loan Estimate",
    "application_date": "App Date",
    "lock_expiration_date": "Lock Exp",
    "closing_date": "Closing Date",
    "funding_date": "Funding Date",
    "stage": "Stage",
    "notes": "Notes",
    "prelims_status": "Prelims",
    "mini_set_status": "Mini Set",
    "cd_status": "CD",
    "pre_approval_date": "Pre-Approval Date",
    "expiration_date": "Expiration Date",
    "status": "Status",
    "property_address": "Property Address",
    "funded_date": "Funded Date",
    "investor": "Investor",
    "group_name": "Group",
})

# Título de columna (minúsculas, sin bordes) -> campo interno.
# Es un best-guess; el admin puede sobreescribirlo guardando mapeos.
DEFAULT_TITLE_MAP: Mapping[str, str] = MappingProxyType({
    "lender": "lender",
    "loan number": "loan_number",
    "subject property": "subject_property",
    "loan officer": "assigned_lo_name",
    "loan amount": "loan_amount",
    "rate": "rate",
    "appraisal status": "appraisal_status",
    "loan purpose": "loan_purpose",
    "loan type": "loan_type",
    "occupancy": "occupancy",
    "title": "title_status",
    "hoi": "hoi_status",
    "loan estimate": "loan_estimate",
    "application date": "application_date",
    "lock expiration date": "lock_expiration_date",
    "lock expiration": "lock_expiration_date",
    "closing date": "closing_date",
    "closing data": "closing_date",  # typo frecuente en boards reales
    "funding date": "funding_date",
    "prelims": "prelims_status",
    "prelims status": "prelims_status",
    "mini set": "mini_set_status",
    "mini set status": "mini_set_status",
    "cd": "cd_status",
    "cd status": "cd_status",
    "pre approval date": "pre_approval_date",
    "expiration date": "expiration_date",
    "property address": "property_address",
    "funded date": "funded_date",
    "fund date": "funded_date",
    "status": "status",
    "investor": "investor",
    "product": "loan_type",
    "product type": "loan_type",
    "property": "property_address",
    "funding amount": "loan_amount",
    "sbj address": "property_address",
    "subject address": "property_address",
})

# Títulos cuyo significado cambia según la sección destino
SECTION_TITLE_OVERRIDES: Mapping[Section, Mapping[str, str]] = MappingProxyType({
    Section.FUNDED_LOANS: MappingProxyType({
        "funding date": "funded_date",
    }),
})

DATE_FIELDS: frozenset[str] = frozenset({
    "application_date", "lock_expiration_date", "closing_date", "funding_date",
    "pre_approval_date", "expiration_date", "funded_date",
})

MONEY_FIELDS: frozenset[str] = frozenset({"loan_amount"})

# Campo de persona asignada: se guarda el nombre y se intenta resolver el id
ASSIGNED_NAME_FIELD = "assigned_lo_name"
ASSIGNED_ID_FIELD = "assigned_lo_id"

# Campo que se siembra con el título del grupo del item
GROUP_FIELD_BY_SECTION: Mapping[Section, str] = MappingProxyType({
    Section.PIPELINE: "stage",
    Section.PRE_APPROVALS: "status",
    Section.FUNDED_LOANS: "group_name",
})

# Valor por defecto del campo de estado si no se derivó ninguno
STATUS_DEFAULT_BY_SECTION: Mapping[Section, Optional[str]] = MappingProxyType({
    Section.PIPELINE: "Unknown",
    Section.PRE_APPROVALS: "Unknown",
    Section.FUNDED_LOANS: None,
})

# Secciones donde un monto ausente se rellena con cero
ZERO_AMOUNT_SECTIONS: frozenset[Section] = frozenset({Section.PIPELINE})


@dataclass(frozen=True)
class FieldRegistry:
    """
    Vista inmutable del registro que consume el mapper.

    Permite inyectar un registro alternativo en tests sin tocar los
    diccionarios del módulo.
    """

    valid_fields: Mapping[Section, tuple[str, ...]] = field(default_factory=lambda: VALID_FIELDS_BY_SECTION)
    labels: Mapping[str, str] = field(default_factory=lambda: FIELD_LABELS)
    title_map: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TITLE_MAP)
    section_title_overrides: Mapping[Section, Mapping[str, str]] = field(
        default_factory=lambda: SECTION_TITLE_OVERRIDES
    )
    date_fields: frozenset[str] = DATE_FIELDS
    money_fields: frozenset[str] = MONEY_FIELDS
    group_field: Mapping[Section, str] = field(default_factory=lambda: GROUP_FIELD_BY_SECTION)
    status_default: Mapping[Section, Optional[str]] = field(default_factory=lambda: STATUS_DEFAULT_BY_SECTION)
    zero_amount_sections: frozenset[Section] = ZERO_AMOUNT_SECTIONS

    def fields_for(self, section: Section) -> tuple[str, ...]:
        return self.valid_fields.get(Section(section), ())

    def is_valid_field(self, section: Section, field_name: str) -> bool:
        return field_name in self.fields_for(section)

    def labels_for(self, section: Section) -> dict[str, str]:
        """Etiquetas de los campos mapeables de la sección, en orden."""
        return {f: self.labels.get(f, f) for f in self.fields_for(section)}

    def suggest_field(self, title: str, section: Optional[Section] = None) -> Optional[str]:
        """
        Sugiere el campo interno para un título de columna.

        Si se indica sección, solo devuelve campos de su whitelist.
        """
        normalized = (title or "").strip().lower()
        if not normalized:
            return None

        suggested = None
        if section is not None:
            suggested = self.section_title_overrides.get(Section(section), {}).get(normalized)
        if suggested is None:
            suggested = self.title_map.get(normalized)

        if suggested is None:
            return None
        if section is not None and not self.is_valid_field(section, suggested):
            return None
        return suggested


DEFAULT_REGISTRY = FieldRegistry()
