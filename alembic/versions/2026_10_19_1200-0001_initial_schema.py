"""initial schema: users, records, record_applications, profiles

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _common_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        *_common_columns(),
        sa.Column('username', sa.String(length=150), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('google_id', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.CheckConstraint(
            'google_id IS NOT NULL OR (username IS NOT NULL AND password_hash IS NOT NULL)',
            name='ck_users_has_identity',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'records',
        *_common_columns(),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('employment_type', sa.String(length=100), nullable=False),
        sa.Column('job_title', sa.String(length=255), nullable=False),
        sa.Column('applied_date', sa.Date(), nullable=False),
        sa.Column('website_link', sa.Text(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('click_count', sa.Integer(), nullable=False),
        sa.Column('received_interview', sa.Boolean(), nullable=True),
        sa.Column('received_offer', sa.Boolean(), nullable=True),
        sa.Column('owner_user_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['owner_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_records_id'), 'records', ['id'], unique=False)
    op.create_index(op.f('ix_records_owner_user_id'), 'records', ['owner_user_id'], unique=False)

    op.create_table(
        'record_applications',
        *_common_columns(),
        sa.Column('record_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['record_id'], ['records.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('record_id', 'user_id', name='uq_record_applications_record_user'),
    )
    op.create_index(op.f('ix_record_applications_id'), 'record_applications', ['id'], unique=False)
    op.create_index(op.f('ix_record_applications_record_id'), 'record_applications', ['record_id'], unique=False)
    op.create_index(op.f('ix_record_applications_user_id'), 'record_applications', ['user_id'], unique=False)

    op.create_table(
        'profiles',
        *_common_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_profiles_id'), 'profiles', ['id'], unique=False)
    op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'], unique=True)


def downgrade() -> None:
    op.drop_table('profiles')
    op.drop_table('record_applications')
    op.drop_table('records')
    op.drop_table('users')
