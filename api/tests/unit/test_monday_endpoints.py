"""
Tests del contrato HTTP de /api/v1/monday.

Los casos de uso se reemplazan via dependency_overrides.
"""
from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from dashboard.api.v1.dependencies.use_case_deps import (
    get_monday_admin_use_cases,
    get_monday_sync_use_cases,
)
from dashboard.application.dto.monday_dto import ColumnMappingDTO, SectionFieldsDTO
from dashboard.application.use_cases.monday_sync_use_cases import SyncRunSummary
from dashboard.shared.constants.monday_constants import Section
from dashboard.shared.exceptions.domain import InvalidMappingFieldException
from dashboard.shared.exceptions.monday import MondayNotConfiguredError, SyncAlreadyRunningError


@pytest.fixture
def sync_use_cases() -> AsyncMock:
    uc = AsyncMock()
    uc.sync_all_boards = AsyncMock(
        return_value=SyncRunSummary(boards=2, items_fetched=5, created=3, updated=1, deleted=1, skipped=1)
    )
    return uc


@pytest.fixture
def admin_use_cases() -> AsyncMock:
    uc = AsyncMock()
    uc.get_field_catalog = Mock(return_value=[
        SectionFieldsDTO(section=Section.FUNDED_LOANS, fields=["funded_date"], labels={"funded_date": "Funded Date"})
    ])
    return uc


@pytest.fixture
def app_with_mocks(sync_use_cases: AsyncMock, admin_use_cases: AsyncMock):
    from main import create_application
    app = create_application()
    app.dependency_overrides[get_monday_sync_use_cases] = lambda: sync_use_cases
    app.dependency_overrides[get_monday_admin_use_cases] = lambda: admin_use_cases
    yield app
    app.dependency_overrides.clear()


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_trigger_sync_returns_summary(app_with_mocks, sync_use_cases: AsyncMock) -> None:
    async with _client(app_with_mocks) as client:
        response = await client.post("/api/v1/monday/sync", headers={"X-User-Id": "12"})

    assert response.status_code == 200
    assert response.json() == {
        "boards": 2,
        "items_fetched": 5,
        "created": 3,
        "updated": 1,
        "deleted": 1,
        "skipped": 1,
    }
    sync_use_cases.sync_all_boards.assert_awaited_once_with(12)


@pytest.mark.asyncio
async def test_trigger_sync_while_running_returns_409(app_with_mocks, sync_use_cases: AsyncMock) -> None:
    sync_use_cases.sync_all_boards.side_effect = SyncAlreadyRunningError()

    async with _client(app_with_mocks) as client:
        response = await client.post("/api/v1/monday/sync")

    assert response.status_code == 409
    assert response.json()["error"] == "SYNC_ALREADY_RUNNING"


@pytest.mark.asyncio
async def test_trigger_sync_without_token_returns_400(app_with_mocks, sync_use_cases: AsyncMock) -> None:
    sync_use_cases.sync_all_boards.side_effect = MondayNotConfiguredError()

    async with _client(app_with_mocks) as client:
        response = await client.post("/api/v1/monday/sync")

    assert response.status_code == 400
    assert response.json()["error"] == "MONDAY_NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_put_mappings_with_invalid_field_returns_400(app_with_mocks, admin_use_cases: AsyncMock) -> None:
    admin_use_cases.save_mappings.side_effect = InvalidMappingFieldException(
        "lender", "funded_loans", ["funded_date"]
    )

    async with _client(app_with_mocks) as client:
        response = await client.put(
            "/api/v1/monday/boards/b1/mappings",
            json={"mappings": [{"monday_column_id": "c1", "pipeline_field": "lender"}]},
        )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "INVALID_MAPPING_FIELD"
    assert body["details"]["field_provided"] == "lender"


@pytest.mark.asyncio
async def test_put_mappings_passes_dtos(app_with_mocks, admin_use_cases: AsyncMock) -> None:
    admin_use_cases.save_mappings.return_value = [
        ColumnMappingDTO(monday_column_id="c1", pipeline_field="funded_date", display_label="Funded Date")
    ]

    async with _client(app_with_mocks) as client:
        response = await client.put(
            "/api/v1/monday/boards/b1/mappings",
            json={"mappings": [{"monday_column_id": "c1", "pipeline_field": "funded_date"}]},
        )

    assert response.status_code == 200
    assert response.json()[0]["display_label"] == "Funded Date"
    board_id, mappings = admin_use_cases.save_mappings.call_args.args
    assert board_id == "b1"
    assert mappings[0].pipeline_field == "funded_date"


@pytest.mark.asyncio
async def test_sync_log_limit_is_bounded(app_with_mocks, admin_use_cases: AsyncMock) -> None:
    admin_use_cases.get_run_history.return_value = []

    async with _client(app_with_mocks) as client:
        too_big = await client.get("/api/v1/monday/sync/log", params={"limit": 500})
        ok = await client.get("/api/v1/monday/sync/log", params={"limit": 10, "board_id": "b1"})

    assert too_big.status_code == 422
    assert ok.status_code == 200
    admin_use_cases.get_run_history.assert_awaited_once_with(board_id="b1", limit=10)


@pytest.mark.asyncio
async def test_sync_status_is_null_before_first_run(app_with_mocks, admin_use_cases: AsyncMock) -> None:
    admin_use_cases.get_last_run.return_value = None

    async with _client(app_with_mocks) as client:
        response = await client.get("/api/v1/monday/sync/status")

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_fields_catalog(app_with_mocks) -> None:
    async with _client(app_with_mocks) as client:
        response = await client.get("/api/v1/monday/fields")

    assert response.status_code == 200
    assert response.json()[0]["section"] == "funded_loans"


@pytest.mark.asyncio
async def test_lifespan_initializes_and_closes_database() -> None:
    from main import create_application

    with patch("dashboard.core.events.init_db", new=AsyncMock()) as init_db, \
            patch("dashboard.core.events.close_db", new=AsyncMock()) as close_db, \
            patch("dashboard.core.events.logger"):
        app = create_application()
        async with app.router.lifespan_context(app):
            init_db.assert_awaited_once()
            close_db.assert_not_awaited()

    close_db.assert_awaited_once()
