"""
Casos de uso de sincronizacion Monday.com -> tablas internas.

Flujo de una corrida:
1. Token: credencial del usuario -> MONDAY_API_TOKEN -> error.
2. Boards activos en orden; mapa nombre -> usuario una sola vez.
3. Por board: mapeo (explicito o auto), log 'pending', fetch, upsert por
   item (commit por item), log 'success'. Un board que falla queda en
   'error' y no corta a los demas.
4. Reconciliacion por seccion con al menos un id visto: se borran las filas
   de Monday.com que no aparecieron en la corrida.

Todo es secuencial. Las llamadas HTTP (cliente sincrono) corren en un
thread via asyncio.to_thread.
"""
import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.application.interfaces.credential_provider import CredentialProvider
from dashboard.core.config import settings
from dashboard.domain.entities.monday_board import MondayBoardConfig
from dashboard.infrastructure.external.monday.client import MondayClient
from dashboard.infrastructure.external.monday.field_registry import DEFAULT_REGISTRY, FieldRegistry
from dashboard.infrastructure.external.monday.mapper import auto_map_columns, map_item_to_row
from dashboard.infrastructure.external.monday.types import MondayCredentials
from dashboard.infrastructure.repositories.monday_board_repository import MondayBoardRepository
from dashboard.infrastructure.repositories.section_row_repository import SectionRowRepository
from dashboard.infrastructure.repositories.sync_log_repository import SyncLogRepository
from dashboard.infrastructure.repositories.user_repository import UserRepository
from dashboard.shared.constants.monday_constants import (
    MONDAY_SERVICE_NAME,
    Section,
    UpsertResult,
)
from dashboard.shared.exceptions.monday import (
    MondayNotConfiguredError,
    SyncAlreadyRunningError,
)


ClientFactory = Callable[[MondayCredentials], MondayClient]


def build_monday_client(credentials: MondayCredentials) -> MondayClient:
    """Cliente configurado desde settings."""
    return MondayClient(
        credentials,
        api_url=settings.MONDAY_API_URL,
        api_version=settings.MONDAY_API_VERSION,
        timeout_s=settings.MONDAY_TIMEOUT_S,
        page_size=settings.MONDAY_PAGE_SIZE,
        max_retries=settings.MONDAY_MAX_RETRIES,
    )


async def resolve_monday_token(
    credentials: CredentialProvider,
    user_id: Optional[int],
    fallback_token: Optional[str] = None,
) -> str:
    """
    Token a usar para la corrida.

    Raises:
        MondayNotConfiguredError: ni el usuario ni el proceso tienen token
    """
    token = await credentials.get_credential(user_id, MONDAY_SERVICE_NAME)
    if token:
        return token
    if fallback_token is None:
        fallback_token = settings.MONDAY_API_TOKEN
    if fallback_token:
        return fallback_token
    raise MondayNotConfiguredError()


@dataclass(frozen=True)
class SyncRunSummary:
    boards: int
    items_fetched: int
    created: int
    updated: int
    deleted: int
    skipped: int = 0


@dataclass
class BoardSyncResult:
    """Conteos de un board dentro de una corrida."""
    board_id: str
    fetched: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    error: Optional[str] = None


class MondaySyncUseCases:
    """
    Orquestador de la sincronizacion de todos los boards activos.

    Una sola corrida a la vez por proceso: un segundo disparo mientras
    hay una corrida en curso lanza SyncAlreadyRunningError.
    """

    _running = False

    def __init__(
        self,
        db: AsyncSession,
        credentials: CredentialProvider,
        client_factory: ClientFactory = build_monday_client,
        registry: FieldRegistry = DEFAULT_REGISTRY,
        fallback_token: Optional[str] = None,
    ):
        self.db = db
        self.credentials = credentials
        self.client_factory = client_factory
        self.registry = registry
        self.fallback_token = fallback_token
        self.board_repo = MondayBoardRepository(db)
        self.log_repo = SyncLogRepository(db)
        self.row_repo = SectionRowRepository(db)
        self.user_repo = UserRepository(db)

    @classmethod
    def is_running(cls) -> bool:
        return MondaySyncUseCases._running

    async def sync_all_boards(self, user_id: Optional[int] = None) -> SyncRunSummary:
        """
        Ejecuta una corrida completa.

        Solo propaga errores que impiden correr cualquier board (sin token,
        corrida ya en curso). El resto queda en el log de corridas.
        """
        if MondaySyncUseCases._running:
            raise SyncAlreadyRunningError()
        MondaySyncUseCases._running = True
        try:
            return await self._run(user_id)
        finally:
            MondaySyncUseCases._running = False

    async def _run(self, user_id: Optional[int]) -> SyncRunSummary:
        token = await resolve_monday_token(self.credentials, user_id, self.fallback_token)
        client = self.client_factory(MondayCredentials(token=token))

        name_to_user_id = await self.user_repo.get_name_to_id_map()
        boards = await self.board_repo.get_active_boards()
        logger.info(f"Sync Monday.com: {len(boards)} board(s) activos (usuario={user_id})")

        seen: Dict[Section, Set[str]] = {section: set() for section in Section}
        results = []
        for board in boards:
            result = await self._sync_board(client, board, user_id, name_to_user_id, seen)
            if result is not None:
                results.append(result)

        deleted = await self._reconcile(seen)

        summary = SyncRunSummary(
            boards=len(boards),
            items_fetched=sum(r.fetched for r in results),
            created=sum(r.created for r in results),
            updated=sum(r.updated for r in results),
            deleted=deleted,
            skipped=sum(r.skipped for r in results),
        )
        logger.success(
            f"Sync Monday.com terminado: boards={summary.boards} fetched={summary.items_fetched} "
            f"created={summary.created} updated={summary.updated} deleted={summary.deleted} "
            f"skipped={summary.skipped}"
        )
        return summary

    async def _resolve_column_map(self, client: MondayClient, board: MondayBoardConfig) -> Dict[str, str]:
        column_map = await self.board_repo.get_column_map(board.board_id)
        if column_map:
            return column_map

        try:
            suggestions = await asyncio.to_thread(
                auto_map_columns, client, board.board_id, board.target_section, self.registry
            )
        except Exception as e:
            logger.warning(f"Board {board.board_id}: no se pudo auto-mapear columnas: {e}")
            return {}

        return {s.monday_column_id: s.pipeline_field for s in suggestions}

    async def _sync_board(
        self,
        client: MondayClient,
        board: MondayBoardConfig,
        user_id: Optional[int],
        name_to_user_id: Dict[str, int],
        seen: Dict[Section, Set[str]],
    ) -> Optional[BoardSyncResult]:
        """
        Sincroniza un board. Retorna None si se omitio por falta de mapeo.

        Cualquier error queda contenido en el board; si la entrada del log
        llego a abrirse, se cierra en 'error'.
        """
        result = BoardSyncResult(board_id=board.board_id)
        log_id: Optional[int] = None
        try:
            column_map = await self._resolve_column_map(client, board)
            if not column_map:
                logger.info(f"Board {board.board_id}: sin mapeos de columnas, se omite")
                return None

            log_id = await self.log_repo.open_run(board.board_id, board.target_section, triggered_by=user_id)
            await self.db.commit()

            await self._sync_items(client, board, column_map, name_to_user_id, seen, result)
            if result.error is not None:
                await self._finish_with_error(log_id, result.error)
                return result

            await self.log_repo.finish_success(
                log_id,
                items_synced=result.fetched,
                created=result.created,
                updated=result.updated,
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            result.error = str(e)
            logger.error(f"Board {board.board_id}: error inesperado: {e}")
            if log_id is not None:
                await self._finish_with_error(log_id, result.error)
            return result

        logger.info(
            f"Board {board.board_id}: {result.fetched} items, {result.created} creados, "
            f"{result.updated} actualizados, {result.skipped} omitidos, {result.failed} con error"
        )
        return result

    async def _sync_items(
        self,
        client: MondayClient,
        board: MondayBoardConfig,
        column_map: Dict[str, str],
        name_to_user_id: Dict[str, int],
        seen: Dict[Section, Set[str]],
        result: BoardSyncResult,
    ) -> None:
        """Fetch + upsert por item. Un fetch fallido deja el error en result."""
        section = board.target_section
        logger.info(f"Board {board.board_id} -> {section.value}: obteniendo items")

        try:
            items = await asyncio.to_thread(client.fetch_all_items, board.board_id)
        except Exception as e:
            result.error = str(e)
            logger.error(f"Board {board.board_id}: error obteniendo items: {e}")
            return

        result.fetched = len(items)

        for item in items:
            item_id = str(item.id)
            seen[section].add(item_id)
            try:
                row = map_item_to_row(item, column_map, name_to_user_id, section, self.registry)
                if section is Section.PIPELINE and not row.client_name:
                    result.skipped += 1
                    continue

                outcome = await self.row_repo.upsert(row)
                await self.db.commit()
            except Exception as e:
                await self.db.rollback()
                result.failed += 1
                logger.error(f"Board {board.board_id}: error guardando item {item_id} ({section.value}): {e}")
                continue

            if outcome is UpsertResult.CREATED:
                result.created += 1
            elif outcome is UpsertResult.UPDATED:
                result.updated += 1
            else:
                result.skipped += 1

    async def _finish_with_error(self, log_id: int, message: str) -> None:
        try:
            await self.log_repo.finish_error(log_id, message)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"No se pudo cerrar la entrada {log_id} del log de corridas: {e}")

    async def _reconcile(self, seen: Dict[Section, Set[str]]) -> int:
        """
        Borra filas de Monday.com no vistas en esta corrida.

        Una seccion sin ids vistos no se toca: si todos sus boards fallaron,
        sus datos quedan intactos.
        """
        deleted = 0
        for section, item_ids in seen.items():
            if not item_ids:
                continue
            try:
                deleted += await self.row_repo.delete_missing(section, item_ids)
                await self.db.commit()
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Error reconciliando la seccion {section.value}: {e}")
        return deleted
