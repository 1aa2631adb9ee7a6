"""
Repositorios de usuarios y de sus integraciones externas.
"""
from typing import Callable, Dict, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.infrastructure.database.models import UserIntegrationModel, UserModel
from dashboard.shared.utils.value_parsers import normalize_name


class UserRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_name_to_id_map(self) -> Dict[str, int]:
        """
        Nombre normalizado -> id de usuario.

        Usuarios sin nombre se omiten. Ante nombres repetidos gana el
        primero por id.
        """
        result = await self.db.execute(
            select(UserModel.id, UserModel.name).order_by(UserModel.id)
        )
        name_map: Dict[str, int] = {}
        for user_id, name in result.all():
            key = normalize_name(name)
            if key and key not in name_map:
                name_map[key] = user_id
        return name_map


class UserIntegrationRepository:
    """
    Lee credenciales de user_integrations.

    Implementa CredentialProvider. El descifrado se inyecta: el formato de
    almacenamiento lo define el modulo que guarda las credenciales.
    """

    def __init__(self, db: AsyncSession, decrypt: Optional[Callable[[str], str]] = None):
        self.db = db
        self._decrypt = decrypt or (lambda value: value)

    async def get_credential(self, user_id: Optional[int], service: str) -> Optional[str]:
        if user_id is None:
            return None

        result = await self.db.execute(
            select(UserIntegrationModel.credential).where(
                UserIntegrationModel.user_id == user_id,
                UserIntegrationModel.service == service,
                UserIntegrationModel.is_active.is_(True),
            )
        )
        stored = result.scalars().first()
        if not stored:
            return None

        try:
            return self._decrypt(stored) or None
        except ValueError as e:
            logger.warning(f"No se pudo descifrar la credencial '{service}' del usuario {user_id}: {e}")
            return None
