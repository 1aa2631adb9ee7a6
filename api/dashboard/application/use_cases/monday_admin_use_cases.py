"""
Casos de uso de administracion de la integracion Monday.com.

Boards, mapeos de columnas, catalogo de campos, historial de corridas y
prueba de conexion. La validacion de mapeos contra el whitelist de la
seccion ocurre aqui, al escribir; la sincronizacion no la repite.
"""
import asyncio
from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.application.dto.monday_dto import (
    BoardColumnDTO,
    BoardColumnsResponseDTO,
    ColumnMappingDTO,
    ConnectionTestDTO,
    MondayBoardDTO,
    SectionFieldsDTO,
    SyncLogEntryDTO,
)
from dashboard.application.interfaces.credential_provider import CredentialProvider
from dashboard.application.use_cases.monday_sync_use_cases import (
    ClientFactory,
    build_monday_client,
    resolve_monday_token,
)
from dashboard.domain.entities.monday_board import ColumnMapping, MondayBoardConfig
from dashboard.infrastructure.external.monday.field_registry import DEFAULT_REGISTRY, FieldRegistry
from dashboard.infrastructure.external.monday.types import MondayCredentials
from dashboard.infrastructure.repositories.monday_board_repository import MondayBoardRepository
from dashboard.infrastructure.repositories.sync_log_repository import SyncLogRepository
from dashboard.shared.constants.monday_constants import DEFAULT_SYNC_HISTORY, Section
from dashboard.shared.exceptions.domain import (
    EntityNotFoundException,
    InvalidMappingFieldException,
    ValidationException,
)
from dashboard.shared.exceptions.monday import MondayApiError, MondayNotConfiguredError


class MondayAdminUseCases:

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

    # --- Boards ---

    async def list_boards(self) -> List[MondayBoardDTO]:
        boards = await self.board_repo.get_all_boards()
        return [MondayBoardDTO.model_validate(b) for b in boards]

    async def save_board(self, dto: MondayBoardDTO) -> MondayBoardDTO:
        board_id = dto.board_id.strip()
        if not board_id:
            raise ValidationException("board_id es obligatorio", field="board_id")

        saved = await self.board_repo.save_board(MondayBoardConfig(
            board_id=board_id,
            board_name=dto.board_name,
            target_section=Section(dto.target_section),
            is_active=dto.is_active,
            display_order=dto.display_order,
        ))
        await self.db.commit()
        return MondayBoardDTO.model_validate(saved)

    async def delete_board(self, board_id: str) -> None:
        deleted = await self.board_repo.delete_board(board_id)
        if not deleted:
            raise EntityNotFoundException("Board", board_id)
        await self.db.commit()

    # --- Mapeos ---

    async def get_mappings(self, board_id: str) -> List[ColumnMappingDTO]:
        mappings = await self.board_repo.get_mappings(board_id)
        return [ColumnMappingDTO.model_validate(m) for m in mappings]

    async def save_mappings(self, board_id: str, mappings: List[ColumnMappingDTO]) -> List[ColumnMappingDTO]:
        """
        Reemplaza los mapeos del board.

        Raises:
            InvalidMappingFieldException: algun campo no pertenece a la seccion
            ValidationException: columna repetida
        """
        section = await self.board_repo.get_board_section(board_id)
        valid_fields = list(self.registry.fields_for(section))

        seen_columns = set()
        for m in mappings:
            if not self.registry.is_valid_field(section, m.pipeline_field):
                raise InvalidMappingFieldException(m.pipeline_field, section.value, valid_fields)
            if m.monday_column_id in seen_columns:
                raise ValidationException(
                    f"Columna '{m.monday_column_id}' mapeada mas de una vez",
                    field="monday_column_id",
                )
            seen_columns.add(m.monday_column_id)

        saved = await self.board_repo.replace_mappings(board_id, [
            ColumnMapping(
                monday_column_id=m.monday_column_id,
                pipeline_field=m.pipeline_field,
                monday_column_title=m.monday_column_title,
                display_label=m.display_label or self.registry.labels.get(m.pipeline_field),
                display_order=m.display_order,
                is_visible=m.is_visible,
            )
            for m in mappings
        ])
        await self.db.commit()
        return [ColumnMappingDTO.model_validate(m) for m in saved]

    async def get_board_columns(self, board_id: str, user_id: Optional[int] = None) -> BoardColumnsResponseDTO:
        """Columnas del board en Monday.com con el campo sugerido para cada una."""
        section = await self.board_repo.get_board_section(board_id)
        client = await self._build_client(user_id)

        board = await asyncio.to_thread(client.fetch_board, board_id)
        if board is None:
            raise EntityNotFoundException("Monday board", board_id)

        return BoardColumnsResponseDTO(
            board_id=str(board_id),
            board_name=board.name,
            section=section,
            columns=[
                BoardColumnDTO(
                    id=c.id,
                    title=c.title,
                    type=c.type,
                    suggested_field=self.registry.suggest_field(c.title, section),
                )
                for c in board.columns
            ],
            valid_fields=list(self.registry.fields_for(section)),
            field_labels=self.registry.labels_for(section),
        )

    def get_field_catalog(self) -> List[SectionFieldsDTO]:
        return [
            SectionFieldsDTO(
                section=section,
                fields=list(self.registry.fields_for(section)),
                labels=self.registry.labels_for(section),
            )
            for section in Section
        ]

    # --- Historial ---

    async def get_last_run(self, board_id: Optional[str] = None) -> Optional[SyncLogEntryDTO]:
        entry = await self.log_repo.get_last(board_id)
        return SyncLogEntryDTO.model_validate(entry) if entry else None

    async def get_run_history(self, board_id: Optional[str] = None, limit: int = DEFAULT_SYNC_HISTORY) -> List[SyncLogEntryDTO]:
        entries = await self.log_repo.get_history(board_id=board_id, limit=limit)
        return [SyncLogEntryDTO.model_validate(e) for e in entries]

    # --- Conexion ---

    async def test_connection(self, user_id: Optional[int] = None) -> ConnectionTestDTO:
        """Prueba el token con `me { name }`. Nunca lanza por errores de la API."""
        try:
            client = await self._build_client(user_id)
            me = await asyncio.to_thread(client.whoami)
        except MondayNotConfiguredError as e:
            return ConnectionTestDTO(success=False, message=e.message)
        except MondayApiError as e:
            logger.warning(f"Prueba de conexion Monday.com fallida: {e.message}")
            return ConnectionTestDTO(success=False, message=e.message)

        name = me.get("name") or me.get("email") or "unknown user"
        return ConnectionTestDTO(success=True, message=f"Connected as {name}")

    async def _build_client(self, user_id: Optional[int]):
        token = await resolve_monday_token(self.credentials, user_id, self.fallback_token)
        return self.client_factory(MondayCredentials(token=token))
