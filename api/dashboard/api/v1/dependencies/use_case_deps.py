"""
Dependencias para inyeccion de casos de uso.
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.api.v1.dependencies.repository_deps import get_credential_provider
from dashboard.application.interfaces.credential_provider import CredentialProvider
from dashboard.application.use_cases.monday_admin_use_cases import MondayAdminUseCases
from dashboard.application.use_cases.monday_sync_use_cases import MondaySyncUseCases
from dashboard.infrastructure.database.session import get_db


async def get_current_user_id(
    x_user_id: Optional[int] = Header(default=None, alias="X-User-Id")
) -> Optional[int]:
    """
    Usuario que realiza la accion.

    La autenticacion ocurre antes (gateway / proveedor de identidad), que
    propaga el id en el header X-User-Id.
    """
    return x_user_id


async def get_monday_sync_use_cases(
    db: AsyncSession = Depends(get_db),
    credentials: CredentialProvider = Depends(get_credential_provider),
) -> MondaySyncUseCases:
    """
    Dependencia para obtener el orquestador de sincronizacion Monday.com.

    Args:
        db: Sesion de base de datos
        credentials: Proveedor de credenciales por usuario

    Returns:
        MondaySyncUseCases: Instancia del orquestador
    """
    return MondaySyncUseCases(db, credentials)


async def get_monday_admin_use_cases(
    db: AsyncSession = Depends(get_db),
    credentials: CredentialProvider = Depends(get_credential_provider),
) -> MondayAdminUseCases:
    """Dependencia para obtener los casos de uso de administracion de Monday.com."""
    return MondayAdminUseCases(db, credentials)
