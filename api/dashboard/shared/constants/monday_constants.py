"""
Constantes de la integracion Monday.com.
"""
from enum import Enum


class Section(str, Enum):
    """Secciones internas (familias de tablas) que alimenta un board."""
    PIPELINE = "pipeline"
    PRE_APPROVALS = "pre_approvals"
    FUNDED_LOANS = "funded_loans"


class SyncStatus(str, Enum):
    """Estados de una entrada del log de sincronizacion."""
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class UpsertResult(str, Enum):
    """Resultado de aplicar un upsert a una fila."""
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


# Etiqueta de procedencia que se escribe en cada fila sincronizada
SOURCE_SYSTEM = "monday"

# Nombre del servicio en user_integrations
MONDAY_SERVICE_NAME = "monday"

# Maximo de entradas devueltas por el historial de sincronizacion
MAX_SYNC_HISTORY = 200
DEFAULT_SYNC_HISTORY = 50
