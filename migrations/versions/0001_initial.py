"""initial schema: users, events, participants, check-in ledger

Revision ID: 0001_initial
Revises:
Create Date: 2025-11-20 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None

user_role = sa.Enum("super_admin", "admin", "user", name="user_role")

def _timestamps():
    return [
        sa.Column("createdAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("phoneNumber", sa.String(20), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("refreshToken", sa.String(500), nullable=True),
        sa.Column("adminId", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_users_adminId_users"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_adminId", "users", ["adminId"])

    op.create_table(
        "events",
        sa.Column("eventId", sa.String(36), primary_key=True),
        sa.Column("eventName", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("createdById", sa.String(36), sa.ForeignKey("users.id", name="fk_events_createdById_users"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_events_createdById", "events", ["createdById"])

    op.create_table(
        "users_events",
        sa.Column("userId", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_users_events_userId_users"), primary_key=True),
        sa.Column("eventId", sa.String(36), sa.ForeignKey("events.eventId", ondelete="CASCADE", name="fk_users_events_eventId_events"), primary_key=True),
        sa.UniqueConstraint("userId", "eventId", name="uq_users_events"),
    )

    op.create_table(
        "participants",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("idNumber", sa.String(50), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("dateOfBirth", sa.Date(), nullable=True),
        sa.Column("sex", sa.String(20), nullable=True),
        sa.Column("county", sa.String(255), nullable=True),
        sa.Column("constituency", sa.String(255), nullable=True),
        sa.Column("ward", sa.String(255), nullable=True),
        sa.Column("pollingCenter", sa.String(255), nullable=True),
        sa.Column("group", sa.String(255), nullable=True),
        sa.Column("phoneNumber", sa.String(20), nullable=True),
        sa.Column("isRegisteredVoter", sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column("isInvited", sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column("eventId", sa.String(36), sa.ForeignKey("events.eventId", ondelete="CASCADE", name="fk_participants_eventId_events"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_participants_event_id_number", "participants", ["eventId", "idNumber"])

    op.create_table(
        "check_in_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("participantId", sa.String(255), sa.ForeignKey("participants.id", ondelete="CASCADE", name="fk_check_in_logs_participantId_participants"), nullable=False),
        sa.Column("eventId", sa.String(36), sa.ForeignKey("events.eventId", ondelete="CASCADE", name="fk_check_in_logs_eventId_events"), nullable=False),
        sa.Column("checkedInById", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_check_in_logs_checkedInById_users"), nullable=True),
        sa.Column("checkInDate", sa.Date(), nullable=False),
        sa.Column("checkedInAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("createdAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        # um check-in por participante, por evento, por dia
        sa.UniqueConstraint("participantId", "eventId", "checkInDate", name="uq_check_in_logs_participant_event_date"),
    )
    op.create_index("ix_check_in_logs_event_id", "check_in_logs", ["eventId"])
    op.create_index("ix_check_in_logs_event_date", "check_in_logs", ["eventId", "checkInDate"])
    op.create_index("ix_check_in_logs_checked_in_by", "check_in_logs", ["checkedInById"])

def downgrade() -> None:
    op.drop_table("check_in_logs")
    op.drop_table("participants")
    op.drop_table("users_events")
    op.drop_table("events")
    op.drop_table("users")
    user_role.drop(op.get_bind(), checkfirst=True)
