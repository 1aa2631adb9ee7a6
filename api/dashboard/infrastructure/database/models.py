"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from dashboard.infrastructure.database.session import Base
from dashboard.shared.constants.monday_constants import Section, SyncStatus


class UserModel(Base):
    """Usuarios internos. La sincronizacion solo lee id y nombre."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(50), default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, name={self.name})>"


class UserIntegrationModel(Base):
    """
    Credenciales de servicios externos por usuario.

    `credential` se guarda cifrado; el formato lo decide quien lo escribe.
    """

    __tablename__ = "user_integrations"
    __table_args__ = (UniqueConstraint("user_id", "service", name="uq_user_integration_service"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    service = Column(String(50), nullable=False)
    credential = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class MondayBoardModel(Base):
    """Board de Monday.com que alimenta una seccion interna."""

    __tablename__ = "monday_boards"

    id = Column(Integer, primary_key=True, index=True)
    board_id = Column(String(50), nullable=False, unique=True, index=True)
    board_name = Column(String(255), nullable=True)
    target_section = Column(String(50), nullable=False, default=Section.PIPELINE.value)
    is_active = Column(Boolean, default=True, index=True)
    display_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<MondayBoard(board_id={self.board_id}, section={self.target_section})>"


class MondayColumnMappingModel(Base):
    """Columna externa -> campo interno, una fila por (board, columna)."""

    __tablename__ = "monday_column_mappings"
    __table_args__ = (UniqueConstraint("board_id", "monday_column_id", name="uq_board_column"),)

    id = Column(Integer, primary_key=True, index=True)
    board_id = Column(String(50), nullable=False, index=True)
    monday_column_id = Column(String(100), nullable=False)
    monday_column_title = Column(String(255), nullable=True)
    pipeline_field = Column(String(100), nullable=False)
    display_label = Column(String(255), nullable=True)
    display_order = Column(Integer, default=0)
    is_visible = Column(Boolean, default=True)


class MondaySyncLogModel(Base):
    """
    Una entrada por (board, corrida).

    Nace en 'pending' antes del fetch y se finaliza una sola vez
    ('success' o 'error'); no se modifica despues.
    """

    __tablename__ = "monday_sync_log"

    id = Column(Integer, primary_key=True, index=True)
    board_id = Column(String(50), nullable=False, index=True)
    target_section = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=SyncStatus.PENDING.value)
    items_synced = Column(Integer, default=0)
    items_created = Column(Integer, default=0)
    items_updated = Column(Integer, default=0)
    error_message = Column(Text, nullable=True)
    triggered_by = Column(Integer, nullable=True)
    started_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<MondaySyncLog(id={self.id}, board_id={self.board_id}, status={self.status})>"


class PipelineModel(Base):
    """Prestamos activos (seccion pipeline)."""

    __tablename__ = "pipeline"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String(255), nullable=False)
    stage = Column(String(100), default="Unknown")
    loan_number = Column(String(100), nullable=True)
    lender = Column(String(255), nullable=True)
    subject_property = Column(String(500), nullable=True)
    loan_amount = Column(Numeric(14, 2), default=0)
    rate = Column(String(50), nullable=True)
    appraisal_status = Column(String(100), nullable=True)
    loan_purpose = Column(String(100), nullable=True)
    loan_type = Column(String(100), nullable=True)
    occupancy = Column(String(100), nullable=True)
    title_status = Column(String(100), nullable=True)
    hoi_status = Column(String(100), nullable=True)
    loan_estimate = Column(String(100), nullable=True)
    application_date = Column(Date, nullable=True)
    lock_expiration_date = Column(Date, nullable=True)
    closing_date = Column(Date, nullable=True)
    funding_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    prelims_status = Column(String(100), nullable=True)
    mini_set_status = Column(String(100), nullable=True)
    cd_status = Column(String(100), nullable=True)
    assigned_lo_name = Column(String(255), nullable=True)
    assigned_lo_id = Column(Integer, nullable=True, index=True)

    # Procedencia
    monday_item_id = Column(String(50), nullable=True, index=True)
    source_system = Column(String(50), nullable=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class PreApprovalModel(Base):
    """Pre-aprobaciones."""

    __tablename__ = "pre_approvals"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String(255), nullable=False)
    status = Column(String(100), default="active")
    loan_amount = Column(Numeric(14, 2), default=0)
    pre_approval_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    property_address = Column(String(500), nullable=True)
    loan_type = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    assigned_lo_name = Column(String(255), nullable=True)
    assigned_lo_id = Column(Integer, nullable=True, index=True)

    monday_item_id = Column(String(50), nullable=True, index=True)
    source_system = Column(String(50), nullable=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class FundedLoanModel(Base):
    """Prestamos fondeados. Sin funded_date la fila no tiene sentido."""

    __tablename__ = "funded_loans"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String(255), nullable=False)
    group_name = Column(String(255), nullable=True)
    loan_amount = Column(Numeric(14, 2), default=0)
    loan_type = Column(String(100), nullable=True)
    funded_date = Column(Date, nullable=False, index=True)
    investor = Column(String(255), nullable=True)
    property_address = Column(String(500), nullable=True)
    assigned_lo_name = Column(String(255), nullable=True)
    assigned_lo_id = Column(Integer, nullable=True, index=True)

    monday_item_id = Column(String(50), nullable=True, index=True)
    source_system = Column(String(50), nullable=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


MODEL_BY_SECTION = {
    Section.PIPELINE: PipelineModel,
    Section.PRE_APPROVALS: PreApprovalModel,
    Section.FUNDED_LOANS: FundedLoanModel,
}
