"""
Dependencias para inyección de repositorios.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.infrastructure.database.session import get_db
from dashboard.infrastructure.repositories.user_repository import UserIntegrationRepository


async def get_credential_provider(
    session: AsyncSession = Depends(get_db)
) -> UserIntegrationRepository:
    """
    Dependencia para obtener el proveedor de credenciales por usuario.

    Las credenciales se leen tal como estan guardadas; si se cifran,
    aqui se inyecta la funcion de descifrado.
    """
    return UserIntegrationRepository(session)
