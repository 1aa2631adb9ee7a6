"""
Repositorio de boards de Monday.com y sus mapeos de columnas.
"""
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.domain.entities.monday_board import ColumnMapping, MondayBoardConfig
from dashboard.infrastructure.database.models import MondayBoardModel, MondayColumnMappingModel
from dashboard.shared.constants.monday_constants import Section


class MondayBoardRepository:
    """Gestiona las tablas monday_boards y monday_column_mappings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_boards(self) -> List[MondayBoardConfig]:
        result = await self.db.execute(
            select(MondayBoardModel).order_by(MondayBoardModel.display_order, MondayBoardModel.id)
        )
        return [self._to_board(b) for b in result.scalars().all()]

    async def get_active_boards(self, section: Optional[Section] = None) -> List[MondayBoardConfig]:
        """
        Boards activos en orden de display_order.

        Args:
            section: Si se indica, solo los boards que alimentan esa seccion
        """
        query = select(MondayBoardModel).where(MondayBoardModel.is_active.is_(True))
        if section is not None:
            query = query.where(MondayBoardModel.target_section == Section(section).value)
        query = query.order_by(MondayBoardModel.display_order, MondayBoardModel.id)

        result = await self.db.execute(query)
        return [self._to_board(b) for b in result.scalars().all()]

    async def get_board_section(self, board_id: str) -> Section:
        """Seccion del board; un board no registrado se trata como pipeline."""
        result = await self.db.execute(
            select(MondayBoardModel.target_section).where(MondayBoardModel.board_id == str(board_id))
        )
        section = result.scalar_one_or_none()
        return _coerce_section(section)

    async def save_board(self, board: MondayBoardConfig) -> MondayBoardConfig:
        """Crea o actualiza un board por su board_id."""
        existing = await self._get_model(board.board_id)

        if existing:
            existing.board_name = board.board_name
            existing.target_section = Section(board.target_section).value
            existing.is_active = board.is_active
            existing.display_order = board.display_order
            model = existing
        else:
            model = MondayBoardModel(
                board_id=str(board.board_id),
                board_name=board.board_name,
                target_section=Section(board.target_section).value,
                is_active=board.is_active,
                display_order=board.display_order,
            )
            self.db.add(model)

        await self.db.flush()
        logger.info(f"Board {board.board_id} guardado (seccion {Section(board.target_section).value})")
        return self._to_board(model)

    async def delete_board(self, board_id: str) -> bool:
        """Elimina el board y sus mapeos. Retorna False si no existia."""
        existing = await self._get_model(board_id)
        if existing is None:
            return False

        await self.db.execute(
            delete(MondayColumnMappingModel).where(MondayColumnMappingModel.board_id == str(board_id))
        )
        await self.db.delete(existing)
        await self.db.flush()
        logger.info(f"Board {board_id} eliminado")
        return True

    async def get_mappings(self, board_id: str) -> List[ColumnMapping]:
        result = await self.db.execute(
            select(MondayColumnMappingModel)
            .where(MondayColumnMappingModel.board_id == str(board_id))
            .order_by(MondayColumnMappingModel.display_order, MondayColumnMappingModel.id)
        )
        return [self._to_mapping(m) for m in result.scalars().all()]

    async def get_column_map(self, board_id: str) -> Dict[str, str]:
        """monday_column_id -> campo interno, listo para el mapper."""
        result = await self.db.execute(
            select(MondayColumnMappingModel.monday_column_id, MondayColumnMappingModel.pipeline_field)
            .where(MondayColumnMappingModel.board_id == str(board_id))
        )
        return {column_id: field for column_id, field in result.all()}

    async def replace_mappings(self, board_id: str, mappings: List[ColumnMapping]) -> List[ColumnMapping]:
        """
        Reemplaza todos los mapeos del board.

        Borrado e inserts van en la misma transaccion; el commit lo hace
        quien llama.
        """
        await self.db.execute(
            delete(MondayColumnMappingModel).where(MondayColumnMappingModel.board_id == str(board_id))
        )
        if mappings:
            await self.db.execute(insert(MondayColumnMappingModel), [
                {
                    "board_id": str(board_id),
                    "monday_column_id": m.monday_column_id,
                    "monday_column_title": m.monday_column_title,
                    "pipeline_field": m.pipeline_field,
                    "display_label": m.display_label,
                    "display_order": m.display_order,
                    "is_visible": m.is_visible,
                }
                for m in mappings
            ])
        logger.info(f"Board {board_id}: {len(mappings)} mapeo(s) guardados")
        return list(mappings)

    async def _get_model(self, board_id: str) -> Optional[MondayBoardModel]:
        result = await self.db.execute(
            select(MondayBoardModel).where(MondayBoardModel.board_id == str(board_id))
        )
        return result.scalars().first()

    @staticmethod
    def _to_board(model: MondayBoardModel) -> MondayBoardConfig:
        return MondayBoardConfig(
            id=model.id,
            board_id=model.board_id,
            board_name=model.board_name,
            target_section=_coerce_section(model.target_section),
            is_active=bool(model.is_active),
            display_order=model.display_order or 0,
        )

    @staticmethod
    def _to_mapping(model: MondayColumnMappingModel) -> ColumnMapping:
        return ColumnMapping(
            monday_column_id=model.monday_column_id,
            pipeline_field=model.pipeline_field,
            monday_column_title=model.monday_column_title,
            display_label=model.display_label,
            display_order=model.display_order or 0,
            is_visible=bool(model.is_visible) if model.is_visible is not None else True,
        )


def _coerce_section(value: Optional[str]) -> Section:
    try:
        return Section(value) if value else Section.PIPELINE
    except ValueError:
        logger.warning(f"Seccion desconocida '{value}', se usa pipeline")
        return Section.PIPELINE
