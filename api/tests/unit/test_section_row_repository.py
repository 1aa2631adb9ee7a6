"""
Tests del motor de upserts por seccion (SQLite en memoria).
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from dashboard.domain.entities.monday_rows import FundedLoanRow, PipelineRow, PreApprovalRow
from dashboard.infrastructure.database.models import FundedLoanModel, PipelineModel, PreApprovalModel
from dashboard.infrastructure.repositories.section_row_repository import SectionRowRepository
from dashboard.shared.constants.monday_constants import Section, UpsertResult


async def _all(db_session, model):
    result = await db_session.execute(select(model))
    return result.scalars().all()


@pytest.mark.asyncio
async def test_pipeline_upsert_creates_then_updates_without_duplicates(db_session) -> None:
    repo = SectionRowRepository(db_session)
    row = PipelineRow(monday_item_id="1", client_name="Jane Doe", loan_amount=Decimal("250000"), stage="Unknown")

    first = await repo.upsert(row)
    await db_session.commit()
    second = await repo.upsert(row)
    await db_session.commit()

    assert first is UpsertResult.CREATED
    assert second is UpsertResult.UPDATED

    rows = await _all(db_session, PipelineModel)
    assert len(rows) == 1
    assert rows[0].client_name == "Jane Doe"
    assert rows[0].loan_amount == Decimal("250000")
    assert rows[0].source_system == "monday"
    assert rows[0].last_synced_at is not None


@pytest.mark.asyncio
async def test_update_does_not_touch_absent_fields(db_session) -> None:
    repo = SectionRowRepository(db_session)
    await repo.upsert(PipelineRow(monday_item_id="1", client_name="Jane", rate="3.5%"))
    await db_session.commit()

    # Nueva corrida: la columna de rate vino vacia, el mapper no la incluye
    await repo.upsert(PipelineRow(monday_item_id="1", client_name="Jane", lender="UWM"))
    await db_session.commit()

    result = await db_session.execute(
        select(PipelineModel.rate, PipelineModel.lender).where(PipelineModel.monday_item_id == "1")
    )
    assert result.one() == ("3.5%", "UWM")


@pytest.mark.asyncio
async def test_insert_uses_table_defaults_for_missing_fields(db_session) -> None:
    repo = SectionRowRepository(db_session)

    result = await repo.upsert(PreApprovalRow(monday_item_id="p1", client_name="Ann"))
    await db_session.commit()

    assert result is UpsertResult.CREATED
    rows = await _all(db_session, PreApprovalModel)
    assert rows[0].status == "active"
    assert rows[0].loan_amount == Decimal("0")


@pytest.mark.asyncio
async def test_funded_row_without_funded_date_is_skipped(db_session) -> None:
    repo = SectionRowRepository(db_session)

    missing = await repo.upsert(FundedLoanRow(monday_item_id="f1", client_name="Ann"))
    unparseable = await repo.upsert(FundedLoanRow(monday_item_id="f1", client_name="Ann", funded_date=None))
    created = await repo.upsert(
        FundedLoanRow(monday_item_id="f1", client_name="Ann", funded_date=date(2024, 5, 6))
    )
    await db_session.commit()

    assert missing is UpsertResult.SKIPPED
    assert unparseable is UpsertResult.SKIPPED
    assert created is UpsertResult.CREATED
    rows = await _all(db_session, FundedLoanModel)
    assert len(rows) == 1
    assert rows[0].funded_date == date(2024, 5, 6)


@pytest.mark.asyncio
async def test_funded_gate_does_not_update_existing_row(db_session) -> None:
    repo = SectionRowRepository(db_session)
    await repo.upsert(FundedLoanRow(monday_item_id="f1", client_name="Ann", funded_date=date(2024, 5, 6)))
    await db_session.commit()

    result = await repo.upsert(FundedLoanRow(monday_item_id="f1", client_name="Renamed"))
    await db_session.commit()

    assert result is UpsertResult.SKIPPED
    rows = await _all(db_session, FundedLoanModel)
    assert rows[0].client_name == "Ann"


@pytest.mark.asyncio
async def test_delete_missing_only_removes_unseen_synced_rows(db_session) -> None:
    repo = SectionRowRepository(db_session)
    await repo.upsert(PipelineRow(monday_item_id="1", client_name="Keep"))
    await repo.upsert(PipelineRow(monday_item_id="2", client_name="Gone"))
    db_session.add(PipelineModel(client_name="Manual entry"))
    await db_session.commit()

    deleted = await repo.delete_missing(Section.PIPELINE, {"1"})
    await db_session.commit()

    assert deleted == 1
    names = sorted(r.client_name for r in await _all(db_session, PipelineModel))
    assert names == ["Keep", "Manual entry"]
