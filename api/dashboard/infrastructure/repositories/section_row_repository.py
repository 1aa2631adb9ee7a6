"""
Upserts idempotentes de filas sincronizadas desde Monday.com.

Una fila por (seccion, monday_item_id): se busca por el id externo y se
actualiza o se inserta. No hace commit; eso lo decide el caso de uso.
"""
from typing import Iterable, List, Tuple

from loguru import logger
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.domain.entities.monday_rows import (
    FundedLoanRow,
    MondayRow,
    PipelineRow,
    PreApprovalRow,
)
from dashboard.infrastructure.database.models import MODEL_BY_SECTION
from dashboard.infrastructure.external.monday.types import utc_now
from dashboard.shared.constants.monday_constants import (
    SOURCE_SYSTEM,
    Section,
    UpsertResult,
)


class SectionRowRepository:
    """Escribe filas de las tablas pipeline, pre_approvals y funded_loans."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert(self, row: MondayRow) -> UpsertResult:
        """Aplica el upsert correspondiente a la variante de la fila."""
        if isinstance(row, PipelineRow):
            return await self.upsert_pipeline_row(row)
        if isinstance(row, PreApprovalRow):
            return await self.upsert_pre_approval_row(row)
        if isinstance(row, FundedLoanRow):
            return await self.upsert_funded_loan_row(row)
        raise TypeError(f"Tipo de fila no soportado: {type(row).__name__}")

    async def upsert_pipeline_row(self, row: PipelineRow) -> UpsertResult:
        return await self._upsert(Section.PIPELINE, row)

    async def upsert_pre_approval_row(self, row: PreApprovalRow) -> UpsertResult:
        return await self._upsert(Section.PRE_APPROVALS, row)

    async def upsert_funded_loan_row(self, row: FundedLoanRow) -> UpsertResult:
        """Un prestamo fondeado sin funded_date no se crea ni se actualiza."""
        if not row.funded_date:
            logger.info(f"Item {row.monday_item_id} sin funded_date, se omite")
            return UpsertResult.SKIPPED
        return await self._upsert(Section.FUNDED_LOANS, row)

    async def _upsert(self, section: Section, row: MondayRow) -> UpsertResult:
        model = MODEL_BY_SECTION[section]
        values = row.to_columns()
        values["source_system"] = SOURCE_SYSTEM
        values["last_synced_at"] = utc_now()

        result = await self.db.execute(
            select(model.id).where(model.monday_item_id == row.monday_item_id).limit(1)
        )
        existing_id = result.scalars().first()

        if existing_id is not None:
            await self.db.execute(
                update(model).where(model.id == existing_id).values(**values)
            )
            return UpsertResult.UPDATED

        await self.db.execute(
            insert(model).values(monday_item_id=row.monday_item_id, **values)
        )
        return UpsertResult.CREATED

    async def list_synced_item_ids(self, section: Section) -> List[Tuple[int, str]]:
        """(id, monday_item_id) de las filas escritas por la sincronizacion."""
        model = MODEL_BY_SECTION[Section(section)]
        result = await self.db.execute(
            select(model.id, model.monday_item_id).where(
                model.source_system == SOURCE_SYSTEM,
                model.monday_item_id.isnot(None),
            )
        )
        return [(row_id, str(item_id)) for row_id, item_id in result.all()]

    async def delete_by_ids(self, section: Section, ids: Iterable[int]) -> int:
        ids = list(ids)
        if not ids:
            return 0
        model = MODEL_BY_SECTION[Section(section)]
        await self.db.execute(delete(model).where(model.id.in_(ids)))
        return len(ids)

    async def delete_missing(self, section: Section, seen_item_ids: set[str]) -> int:
        """
        Borra las filas sincronizadas cuyo id externo no se vio en la corrida.

        Retorna la cantidad de filas borradas.
        """
        stale = [
            row_id
            for row_id, item_id in await self.list_synced_item_ids(section)
            if item_id not in seen_item_ids
        ]
        deleted = await self.delete_by_ids(section, stale)
        if deleted:
            logger.info(f"Seccion {Section(section).value}: {deleted} fila(s) ya no existen en Monday.com")
        return deleted
