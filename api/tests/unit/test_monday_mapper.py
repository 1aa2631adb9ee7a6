"""
Tests del mapper item -> fila y del auto-mapeo por titulo de columna.
"""
from datetime import date
from decimal import Decimal

from conftest import FakeMondayClient, make_item
from dashboard.domain.entities.monday_rows import FundedLoanRow, PipelineRow, PreApprovalRow
from dashboard.infrastructure.external.monday.field_registry import DEFAULT_REGISTRY, FieldRegistry
from dashboard.infrastructure.external.monday.mapper import auto_map_columns, map_item_to_row
from dashboard.infrastructure.external.monday.types import MondayColumn
from dashboard.shared.constants.monday_constants import Section


def test_end_to_end_pipeline_item() -> None:
    item = make_item("1", "Jane Doe", {"c1": "250000"})

    row = map_item_to_row(item, {"c1": "loan_amount"}, {}, Section.PIPELINE)

    assert isinstance(row, PipelineRow)
    assert row.to_columns() == {
        "client_name": "Jane Doe",
        "loan_amount": Decimal("250000"),
        "stage": "Unknown",
    }
    assert row.monday_item_id == "1"


def test_blank_text_never_sets_a_field() -> None:
    item = make_item("7", "Bob", {"rate": "   ", "lender": "UWM"})

    row = map_item_to_row(item, {"rate": "rate", "lender": "lender"}, {})

    columns = row.to_columns()
    assert "rate" not in columns
    assert columns["lender"] == "UWM"


def test_money_parsing_and_unparseable_amount_is_null() -> None:
    column_map = {"amt": "loan_amount"}

    parsed = map_item_to_row(make_item("1", "A", {"amt": "$1,250,000.00"}), column_map, {})
    garbage = map_item_to_row(make_item("2", "B", {"amt": "TBD"}), column_map, {})

    assert parsed.loan_amount == Decimal("1250000.00")
    assert "loan_amount" in garbage.to_columns()
    assert garbage.loan_amount is None


def test_missing_amount_defaults_to_zero_only_for_pipeline() -> None:
    pipeline = map_item_to_row(make_item("1", "A"), {}, {}, Section.PIPELINE)
    pre_approval = map_item_to_row(make_item("1", "A"), {}, {}, Section.PRE_APPROVALS)

    assert pipeline.loan_amount == Decimal(0)
    assert "loan_amount" not in pre_approval.to_columns()


def test_blank_name_defaults_to_unnamed() -> None:
    row = map_item_to_row(make_item("1", "   "), {}, {})
    assert row.client_name == "Unnamed"


def test_group_title_seeds_stage_and_column_overrides_it() -> None:
    seeded = map_item_to_row(make_item("1", "A", group="Processing"), {}, {})
    overridden = map_item_to_row(
        make_item("1", "A", {"st": "Closed"}, group="Processing"), {"st": "stage"}, {}
    )

    assert seeded.stage == "Processing"
    assert overridden.stage == "Closed"


def test_assigned_officer_resolves_user_id_case_insensitive() -> None:
    name_map = {"maria lopez": 42}
    column_map = {"lo": "assigned_lo_name"}

    matched = map_item_to_row(make_item("1", "A", {"lo": "  Maria LOPEZ "}), column_map, name_map)
    unmatched = map_item_to_row(make_item("2", "B", {"lo": "Somebody Else"}), column_map, name_map)

    assert matched.assigned_lo_name == "Maria LOPEZ"
    assert matched.assigned_lo_id == 42
    assert unmatched.assigned_lo_name == "Somebody Else"
    assert "assigned_lo_id" not in unmatched.to_columns()


def test_date_from_json_value_with_text_fallback() -> None:
    column_map = {"close": "closing_date", "app": "application_date", "lock": "lock_expiration_date"}
    item = make_item("1", "A", {
        "close": ("Mar 1", '{"date": "2024-03-01", "changed_at": "2024-02-01"}'),
        "app": ("01/15/2024", "{broken json"),
        "lock": ("someday", None),
    })

    row = map_item_to_row(item, column_map, {})

    assert row.closing_date == date(2024, 3, 1)
    assert row.application_date == date(2024, 1, 15)
    assert "lock_expiration_date" in row.to_columns()
    assert row.lock_expiration_date is None


def test_other_fields_are_trimmed_text() -> None:
    row = map_item_to_row(make_item("1", "A", {"n": "  call lender  "}), {"n": "notes"}, {})
    assert row.notes == "call lender"


def test_fields_outside_section_whitelist_are_dropped() -> None:
    item = make_item("1", "A", {"inv": "Rocket", "lender": "UWM"})
    column_map = {"inv": "investor", "lender": "lender"}

    row = map_item_to_row(item, column_map, {}, Section.PIPELINE)

    assert "investor" not in row.to_columns()
    assert row.lender == "UWM"


def test_pre_approval_status_from_group_or_unknown() -> None:
    grouped = map_item_to_row(make_item("1", "A", group="Active"), {}, {}, Section.PRE_APPROVALS)
    ungrouped = map_item_to_row(make_item("2", "B"), {}, {}, Section.PRE_APPROVALS)

    assert isinstance(grouped, PreApprovalRow)
    assert grouped.status == "Active"
    assert ungrouped.status == "Unknown"


def test_funded_row_keeps_group_name_and_has_no_status_default() -> None:
    item = make_item("9", "C", {"fd": ("", '{"date": "2024-05-05"}'), "f2": "2024-05-06"}, group="May 2024")

    row = map_item_to_row(item, {"fd": "funded_date", "f2": "funded_date"}, {}, Section.FUNDED_LOANS)

    assert isinstance(row, FundedLoanRow)
    assert row.group_name == "May 2024"
    # "fd" tiene texto vacio: se ignora aunque el valor crudo traiga fecha
    assert row.funded_date == date(2024, 5, 6)
    assert "loan_amount" not in row.to_columns()


def test_mapper_uses_injected_registry() -> None:
    registry = FieldRegistry(zero_amount_sections=frozenset())
    row = map_item_to_row(make_item("1", "A"), {}, {}, Section.PIPELINE, registry)
    assert "loan_amount" not in row.to_columns()


def test_auto_map_columns_matches_titles_and_drops_unknown() -> None:
    client = FakeMondayClient(columns={"b1": [
        MondayColumn(id="c1", title="  Loan Amount "),
        MondayColumn(id="c2", title="Closing Data"),
        MondayColumn(id="c3", title="Favourite Color"),
        MondayColumn(id="c4", title="Funding Date"),
    ]})

    suggestions = auto_map_columns(client, "b1")

    assert {(s.monday_column_id, s.pipeline_field) for s in suggestions} == {
        ("c1", "loan_amount"),
        ("c2", "closing_date"),
        ("c4", "funding_date"),
    }


def test_auto_map_columns_respects_section_whitelist() -> None:
    client = FakeMondayClient(columns={"b1": [
        MondayColumn(id="c1", title="Funding Date"),
        MondayColumn(id="c2", title="Lender"),
        MondayColumn(id="c3", title="Investor"),
    ]})

    suggestions = auto_map_columns(client, "b1", Section.FUNDED_LOANS)

    assert {(s.monday_column_id, s.pipeline_field) for s in suggestions} == {
        ("c1", "funded_date"),
        ("c3", "investor"),
    }


def test_registry_suggest_field() -> None:
    assert DEFAULT_REGISTRY.suggest_field("Loan Officer") == "assigned_lo_name"
    assert DEFAULT_REGISTRY.suggest_field("lender", Section.PRE_APPROVALS) is None
    assert DEFAULT_REGISTRY.suggest_field("") is None
