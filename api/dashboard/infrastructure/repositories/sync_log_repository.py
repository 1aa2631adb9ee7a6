"""
Repositorio del log de corridas de sincronizacion (monday_sync_log).

Las entradas se crean en 'pending' y se finalizan una sola vez; las
funciones de cierre solo tocan entradas que siguen en 'pending'.
"""
from typing import List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.domain.entities.monday_board import SyncLogEntry
from dashboard.infrastructure.database.models import MondaySyncLogModel
from dashboard.infrastructure.external.monday.types import utc_now
from dashboard.shared.constants.monday_constants import (
    DEFAULT_SYNC_HISTORY,
    MAX_SYNC_HISTORY,
    Section,
    SyncStatus,
)


class SyncLogRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def open_run(
        self,
        board_id: str,
        section: Section,
        triggered_by: Optional[int] = None,
    ) -> int:
        """Crea la entrada 'pending' y retorna su id."""
        result = await self.db.execute(
            insert(MondaySyncLogModel)
            .values(
                board_id=str(board_id),
                target_section=Section(section).value,
                status=SyncStatus.PENDING.value,
                triggered_by=triggered_by,
                started_at=utc_now(),
            )
            .returning(MondaySyncLogModel.id)
        )
        return result.scalar_one()

    async def finish_success(self, log_id: int, *, items_synced: int, created: int, updated: int) -> None:
        await self._finish(
            log_id,
            status=SyncStatus.SUCCESS.value,
            items_synced=items_synced,
            items_created=created,
            items_updated=updated,
        )

    async def finish_error(self, log_id: int, error_message: str) -> None:
        await self._finish(
            log_id,
            status=SyncStatus.ERROR.value,
            error_message=error_message,
        )

    async def _finish(self, log_id: int, **values) -> None:
        await self.db.execute(
            update(MondaySyncLogModel)
            .where(
                MondaySyncLogModel.id == log_id,
                MondaySyncLogModel.status == SyncStatus.PENDING.value,
            )
            .values(finished_at=utc_now(), **values)
        )

    async def get_last(self, board_id: Optional[str] = None) -> Optional[SyncLogEntry]:
        """Ultima entrada (global o de un board)."""
        history = await self.get_history(board_id=board_id, limit=1)
        return history[0] if history else None

    async def get_history(self, board_id: Optional[str] = None, limit: int = DEFAULT_SYNC_HISTORY) -> List[SyncLogEntry]:
        limit = max(1, min(int(limit), MAX_SYNC_HISTORY))
        query = select(MondaySyncLogModel)
        if board_id:
            query = query.where(MondaySyncLogModel.board_id == str(board_id))
        query = query.order_by(MondaySyncLogModel.started_at.desc(), MondaySyncLogModel.id.desc()).limit(limit)

        result = await self.db.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    @staticmethod
    def _to_entity(model: MondaySyncLogModel) -> SyncLogEntry:
        return SyncLogEntry(
            id=model.id,
            board_id=model.board_id,
            status=SyncStatus(model.status),
            target_section=model.target_section,
            items_synced=model.items_synced or 0,
            items_created=model.items_created or 0,
            items_updated=model.items_updated or 0,
            error_message=model.error_message,
            triggered_by=model.triggered_by,
            started_at=model.started_at,
            finished_at=model.finished_at,
        )
