"""
Casos de uso de la aplicacion.
"""
from .monday_sync_use_cases import MondaySyncUseCases
from .monday_admin_use_cases import MondayAdminUseCases

__all__ = ["MondaySyncUseCases", "MondayAdminUseCases"]
