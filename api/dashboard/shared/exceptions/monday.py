"""
Excepciones de la integracion Monday.com.

SafetyViolationError NO hereda de MondayApiError: un rechazo por mutation
debe distinguirse de una falla de red o de la API en logs y en callers.
"""
from typing import Optional

from dashboard.shared.exceptions.base import AppException


class MondayApiError(AppException):
    """Falla HTTP, de transporte o GraphQL hablando con Monday.com."""

    def __init__(self, message: str, http_status: Optional[int] = None):
        self.http_status = http_status
        details = {"http_status": http_status} if http_status is not None else None
        super().__init__(
            message=message,
            status_code=502,
            error_code="MONDAY_API_ERROR",
            details=details
        )


class SafetyViolationError(AppException):
    """Se intento enviar una mutation; la integracion es de solo lectura."""

    def __init__(self, message: str = "SAFETY: Mutations are not allowed, this integration is read-only"):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SAFETY_VIOLATION"
        )


class MondayNotConfiguredError(AppException):
    """No hay token de Monday.com (ni del usuario ni del proceso)."""

    def __init__(self):
        super().__init__(
            message="Monday.com API token not configured. Add it via Settings > Integrations.",
            status_code=400,
            error_code="MONDAY_NOT_CONFIGURED"
        )


class SyncAlreadyRunningError(AppException):
    """Ya hay una corrida de sincronizacion en curso en este proceso."""

    def __init__(self):
        super().__init__(
            message="A Monday.com sync is already running",
            status_code=409,
            error_code="SYNC_ALREADY_RUNNING"
        )
