"""create users, profiles and personal_records tables

Revision ID: 3e1c9b7a5d20
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3e1c9b7a5d20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()

    if 'users' not in tables:
        op.create_table(
            'users',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if 'profiles' not in tables:
        op.create_table(
            'profiles',
            sa.Column('id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
            sa.Column('name', sa.String(), nullable=False, server_default=''),
            sa.Column('location', sa.String(), nullable=False, server_default=''),
            sa.Column('bio', sa.String(length=150), nullable=False, server_default=''),
            sa.Column('avatar_url', sa.String(), nullable=False, server_default=''),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )

    if 'personal_records' not in tables:
        op.create_table(
            'personal_records',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
            sa.Column('distance', sa.String(), nullable=False),
            sa.Column('hours', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('minutes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('seconds', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('race_location', sa.String(), nullable=True),
            sa.Column('date_achieved', sa.Date(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.CheckConstraint('hours >= 0', name='ck_personal_records_hours'),
            sa.CheckConstraint('minutes BETWEEN 0 AND 59', name='ck_personal_records_minutes'),
            sa.CheckConstraint('seconds BETWEEN 0 AND 59', name='ck_personal_records_seconds'),
        )
        op.create_index('ix_personal_records_user_id', 'personal_records', ['user_id'])


def downgrade() -> None:
    # Safe drop if exists
    op.execute('DROP TABLE IF EXISTS personal_records')
    op.execute('DROP TABLE IF EXISTS profiles')
    op.execute('DROP TABLE IF EXISTS users')
