"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from dashboard.infrastructure.database.models import (
    UserModel,
    UserIntegrationModel,
    MondayBoardModel,
    MondayColumnMappingModel,
    MondaySyncLogModel,
    PipelineModel,
    PreApprovalModel,
    FundedLoanModel,
)
