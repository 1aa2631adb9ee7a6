"""
Interfaz para obtener credenciales de servicios externos por usuario.

Los casos de uso de sincronizacion no conocen como se guardan ni como se
cifran los tokens; solo piden el secreto en claro.
"""

from __future__ import annotations

from typing import Optional, Protocol


class CredentialProvider(Protocol):
    """
    Fuente de credenciales por (usuario, servicio).

    Implementaciones:
    - UserIntegrationRepository (tabla user_integrations).
    - Fake en tests.
    """

    async def get_credential(self, user_id: Optional[int], service: str) -> Optional[str]:
        """Retorna el secreto en claro, o None si el usuario no lo configuro."""
        ...
