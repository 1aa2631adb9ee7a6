"""
Endpoints de la integracion Monday.com (solo lectura hacia Monday).

La sincronizacion se dispara desde la UI; los errores por board o por item
no se devuelven aqui, quedan en /monday/sync/log.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dashboard.api.v1.dependencies.use_case_deps import (
    get_current_user_id,
    get_monday_admin_use_cases,
    get_monday_sync_use_cases,
)
from dashboard.application.dto.monday_dto import (
    BoardColumnsResponseDTO,
    ColumnMappingDTO,
    ColumnMappingsUpdateDTO,
    ConnectionTestDTO,
    MondayBoardDTO,
    SectionFieldsDTO,
    SyncLogEntryDTO,
    SyncRunSummaryDTO,
)
from dashboard.application.use_cases.monday_admin_use_cases import MondayAdminUseCases
from dashboard.application.use_cases.monday_sync_use_cases import MondaySyncUseCases
from dashboard.shared.constants.monday_constants import DEFAULT_SYNC_HISTORY, MAX_SYNC_HISTORY


router = APIRouter(prefix="/monday", tags=["Monday.com"])


@router.post("/sync", response_model=SyncRunSummaryDTO)
async def trigger_sync(
    user_id: Optional[int] = Depends(get_current_user_id),
    use_cases: MondaySyncUseCases = Depends(get_monday_sync_use_cases),
):
    """
    Sincroniza todos los boards activos.

    Retorna los totales de la corrida. 409 si ya hay una corrida en curso,
    400 si no hay token configurado.
    """
    summary = await use_cases.sync_all_boards(user_id)
    return SyncRunSummaryDTO(
        boards=summary.boards,
        items_fetched=summary.items_fetched,
        created=summary.created,
        updated=summary.updated,
        deleted=summary.deleted,
        skipped=summary.skipped,
    )


@router.get("/sync/status", response_model=Optional[SyncLogEntryDTO])
async def get_sync_status(
    board_id: Optional[str] = Query(None),
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    """Ultima entrada del log (global o de un board); null si nunca se corrio."""
    return await use_cases.get_last_run(board_id)


@router.get("/sync/log", response_model=List[SyncLogEntryDTO])
async def get_sync_log(
    board_id: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_SYNC_HISTORY, ge=1, le=MAX_SYNC_HISTORY),
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    """Historial de corridas, mas recientes primero."""
    return await use_cases.get_run_history(board_id=board_id, limit=limit)


@router.get("/boards", response_model=List[MondayBoardDTO])
async def list_boards(use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases)):
    return await use_cases.list_boards()


@router.post("/boards", response_model=MondayBoardDTO, status_code=status.HTTP_201_CREATED)
async def save_board(
    dto: MondayBoardDTO,
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    """Crea o actualiza la configuracion de un board."""
    return await use_cases.save_board(dto)


@router.delete("/boards/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(
    board_id: str,
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    """Elimina el board y sus mapeos. Las filas ya sincronizadas no se tocan."""
    await use_cases.delete_board(board_id)


@router.get("/boards/{board_id}/columns", response_model=BoardColumnsResponseDTO)
async def get_board_columns(
    board_id: str,
    user_id: Optional[int] = Depends(get_current_user_id),
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    """Columnas del board en Monday.com con el campo sugerido para cada una."""
    return await use_cases.get_board_columns(board_id, user_id)


@router.get("/boards/{board_id}/mappings", response_model=List[ColumnMappingDTO])
async def get_mappings(
    board_id: str,
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    return await use_cases.get_mappings(board_id)


@router.put("/boards/{board_id}/mappings", response_model=List[ColumnMappingDTO])
async def save_mappings(
    board_id: str,
    dto: ColumnMappingsUpdateDTO,
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    """
    Reemplaza los mapeos del board.

    400 INVALID_MAPPING_FIELD si algun campo no pertenece a la seccion.
    """
    return await use_cases.save_mappings(board_id, dto.mappings)


@router.get("/fields", response_model=List[SectionFieldsDTO])
async def get_fields(use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases)):
    """Campos mapeables y etiquetas por seccion."""
    return use_cases.get_field_catalog()


@router.get("/connection", response_model=ConnectionTestDTO)
async def test_connection(
    user_id: Optional[int] = Depends(get_current_user_id),
    use_cases: MondayAdminUseCases = Depends(get_monday_admin_use_cases),
):
    return await use_cases.test_connection(user_id)
