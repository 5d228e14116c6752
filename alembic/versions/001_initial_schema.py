"""initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from datetime import datetime, timezone
from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def audit_columns() -> List[sa.Column]:
    """Audit envelope shared by every table."""
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('updated_by', sa.String(length=100), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def uuid_key(name: str = 'id') -> sa.Column:
    return sa.Column(name, sa.String(length=36), nullable=False)


def fk_index(table: str, *columns: str) -> None:
    for column in columns:
        op.create_index(op.f(f'ix_{table}_{column}'), table, [column], unique=False)


def upgrade() -> None:
    # --- Identity ---
    op.create_table(
        'system_roles',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'permissions',
        uuid_key(),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_permissions_code'), 'permissions', ['code'], unique=True)

    op.create_table(
        'system_role_permissions',
        uuid_key(),
        sa.Column('system_role_id', sa.Integer(), nullable=False),
        sa.Column('permission_id', sa.String(length=36), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['system_role_id'], ['system_roles.id'], ),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('system_role_permissions', 'system_role_id', 'permission_id')

    op.create_table(
        'users',
        uuid_key(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('arabic_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('system_role_id', sa.Integer(), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_verification_token', sa.String(length=64), nullable=True),
        sa.Column('email_verification_expires_at', sa.DateTime(), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['system_role_id'], ['system_roles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    fk_index('users', 'system_role_id', 'email_verification_token')

    op.create_table(
        'explore_user_accesses',
        uuid_key('user_id'),
        sa.Column('trial_start', sa.DateTime(), nullable=False),
        sa.Column('trial_end', sa.DateTime(), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('user_id')
    )

    op.create_table(
        'user_action_logs',
        uuid_key(),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('context', sa.String(length=1000), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('user_action_logs', 'user_id')

    # --- Accreditation catalogue ---
    op.create_table(
        'accreditations',
        uuid_key(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('arabic_name', sa.String(length=200), nullable=True),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('arabic_description', sa.String(length=1000), nullable=True),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('accreditations', 'name')

    op.create_table(
        'facility_types',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('type_name', sa.String(length=100), nullable=False),
        sa.Column('arabic_type_name', sa.String(length=100), nullable=True),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'chapters',
        uuid_key(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('arabic_title', sa.String(length=200), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=False),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'chapter_accreditation_facility_types',
        uuid_key(),
        sa.Column('chapter_id', sa.String(length=36), nullable=False),
        sa.Column('accreditation_id', sa.String(length=36), nullable=False),
        sa.Column('facility_type_id', sa.Integer(), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['chapter_id'], ['chapters.id'], ),
        sa.ForeignKeyConstraint(['accreditation_id'], ['accreditations.id'], ),
        sa.ForeignKeyConstraint(['facility_type_id'], ['facility_types.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('chapter_accreditation_facility_types', 'chapter_id', 'accreditation_id', 'facility_type_id')

    op.create_table(
        'standards',
        uuid_key(),
        sa.Column('chapter_accreditation_facility_type_id', sa.String(length=36), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('arabic_description', sa.String(length=1000), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=False),
        sa.Column('is_applicable', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
        sa.ForeignKeyConstraint(['chapter_accreditation_facility_type_id'], ['chapter_accreditation_facility_types.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('standards', 'chapter_accreditation_facility_type_id')

    op.create_table(
        'eocs',
        uuid_key(),
        sa.Column('standard_id', sa.String(length=36), nullable=False),
        sa.Column('text', sa.String(length=1000), nullable=False),
        sa.Column('arabic_text', sa.String(length=1000), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('is_applicable', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
        sa.ForeignKeyConstraint(['standard_id'], ['standards.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('eocs', 'standard_id')

    op.create_table(
        'questions',
        uuid_key(),
        sa.Column('eoc_id', sa.String(length=36), nullable=False),
        sa.Column('question_type', sa.String(length=20), nullable=False),
        sa.Column('text', sa.String(length=1000), nullable=False),
        sa.Column('arabic_text', sa.String(length=1000), nullable=True),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('depends_on_question_id', sa.String(length=36), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['eoc_id'], ['eocs.id'], ),
        sa.ForeignKeyConstraint(['depends_on_question_id'], ['questions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('questions', 'eoc_id')

    op.create_table(
        'answer_options',
        uuid_key(),
        sa.Column('question_id', sa.String(length=36), nullable=False),
        sa.Column('option_text', sa.String(length=500), nullable=False),
        sa.Column('arabic_option_text', sa.String(length=500), nullable=True),
        sa.Column('improvement_scenario_id', sa.String(length=36), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('answer_options', 'question_id', 'improvement_scenario_id')

    op.create_table(
        'improvement_scenarios',
        uuid_key(),
        sa.Column('answer_option_id', sa.String(length=36), nullable=False),
        sa.Column('scenario_text', sa.String(length=2000), nullable=False),
        sa.Column('arabic_scenario_text', sa.String(length=2000), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['answer_option_id'], ['answer_options.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('improvement_scenarios', 'answer_option_id')

    # --- Facilities ---
    op.create_table(
        'facilities',
        uuid_key('user_id'),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('arabic_name', sa.String(length=200), nullable=True),
        sa.Column('location', sa.String(length=500), nullable=True),
        sa.Column('arabic_location', sa.String(length=500), nullable=True),
        sa.Column('company_size', sa.String(length=10), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('tel', sa.String(length=20), nullable=True),
        sa.Column('accreditation_id', sa.String(length=36), nullable=False),
        sa.Column('facility_type_id', sa.Integer(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.String(length=100), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['accreditation_id'], ['accreditations.id'], ),
        sa.ForeignKeyConstraint(['facility_type_id'], ['facility_types.id'], ),
        sa.PrimaryKeyConstraint('user_id')
    )
    fk_index('facilities', 'accreditation_id', 'facility_type_id', 'is_approved')

    op.create_table(
        'facility_roles',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'facility_role_permissions',
        uuid_key(),
        sa.Column('facility_role_id', sa.Integer(), nullable=False),
        sa.Column('permission_id', sa.String(length=36), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['facility_role_id'], ['facility_roles.id'], ),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('facility_role_permissions', 'facility_role_id', 'permission_id')

    op.create_table(
        'facility_users',
        uuid_key('user_id'),
        sa.Column('facility_id', sa.String(length=36), nullable=False),
        sa.Column('facility_role_id', sa.Integer(), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['facility_id'], ['facilities.user_id'], ),
        sa.ForeignKeyConstraint(['facility_role_id'], ['facility_roles.id'], ),
        sa.PrimaryKeyConstraint('user_id')
    )
    fk_index('facility_users', 'facility_id', 'facility_role_id')

    # --- Billing ---
    op.create_table(
        'features',
        uuid_key(),
        sa.Column('text', sa.String(length=500), nullable=False),
        sa.Column('arabic_text', sa.String(length=500), nullable=True),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'subscription_plans',
        uuid_key(),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('pricing', sa.Integer(), nullable=False),
        *audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'subscription_plan_features',
        uuid_key(),
        sa.Column('subscription_plan_id', sa.String(length=36), nullable=False),
        sa.Column('feature_id', sa.String(length=36), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['subscription_plan_id'], ['subscription_plans.id'], ),
        sa.ForeignKeyConstraint(['feature_id'], ['features.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('subscription_plan_features', 'subscription_plan_id', 'feature_id')

    op.create_table(
        'subscriptions',
        uuid_key(),
        sa.Column('facility_id', sa.String(length=36), nullable=False),
        sa.Column('plan_id', sa.String(length=36), nullable=False),
        sa.Column('start', sa.DateTime(), nullable=False),
        sa.Column('expiry', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['facility_id'], ['facilities.user_id'], ),
        sa.ForeignKeyConstraint(['plan_id'], ['subscription_plans.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('subscriptions', 'facility_id', 'plan_id')

    op.create_table(
        'payments',
        uuid_key(),
        sa.Column('facility_id', sa.String(length=36), nullable=False),
        sa.Column('subscription_id', sa.String(length=36), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('method', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='SAR'),
        *audit_columns(),
        sa.ForeignKeyConstraint(['facility_id'], ['facilities.user_id'], ),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscriptions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('payments', 'facility_id', 'subscription_id')

    # --- Gap analysis sessions ---
    op.create_table(
        'gap_analysis_sessions',
        uuid_key(),
        sa.Column('facility_id', sa.String(length=36), nullable=False),
        sa.Column('start', sa.DateTime(), nullable=False),
        sa.Column('end', sa.DateTime(), nullable=True),
        *audit_columns(),
        sa.ForeignKeyConstraint(['facility_id'], ['facilities.user_id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('gap_analysis_sessions', 'facility_id')

    op.create_table(
        'session_components',
        uuid_key(),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('question_id', sa.String(length=36), nullable=False),
        sa.Column('answer', sa.String(length=1000), nullable=False),
        sa.Column('answer_status', sa.String(length=20), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['session_id'], ['gap_analysis_sessions.id'], ),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('session_components', 'session_id', 'question_id')

    op.create_table(
        'action_plan_components',
        uuid_key(),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('scenario_id', sa.String(length=36), nullable=False),
        sa.Column('assigned_to', sa.String(length=36), nullable=True),
        sa.Column('progress_status', sa.String(length=20), nullable=False),
        *audit_columns(),
        sa.ForeignKeyConstraint(['session_id'], ['gap_analysis_sessions.id'], ),
        sa.ForeignKeyConstraint(['scenario_id'], ['improvement_scenarios.id'], ),
        sa.ForeignKeyConstraint(['assigned_to'], ['facility_users.user_id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    fk_index('action_plan_components', 'session_id', 'scenario_id', 'assigned_to')

    # Built-in system roles; ids match framework.security
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    roles = sa.table(
        'system_roles',
        sa.column('id', sa.Integer()),
        sa.column('name', sa.String()),
        sa.column('created_at', sa.DateTime()),
        sa.column('created_by', sa.String()),
        sa.column('updated_at', sa.DateTime()),
        sa.column('updated_by', sa.String()),
    )
    op.bulk_insert(roles, [
        {'id': role_id, 'name': name, 'created_at': now, 'created_by': 'system',
         'updated_at': now, 'updated_by': 'system'}
        for role_id, name in [(1, 'Admin'), (2, 'Facility'), (3, 'Staff'), (4, 'Explore')]
    ])


def downgrade() -> None:
    # Reverse dependency order
    for table in [
        'action_plan_components', 'session_components', 'gap_analysis_sessions',
        'payments', 'subscriptions', 'subscription_plan_features', 'subscription_plans', 'features',
        'facility_users', 'facility_role_permissions', 'facility_roles', 'facilities',
        'improvement_scenarios', 'answer_options', 'questions', 'eocs', 'standards',
        'chapter_accreditation_facility_types', 'chapters', 'facility_types', 'accreditations',
        'user_action_logs', 'explore_user_accesses', 'users',
        'system_role_permissions', 'permissions', 'system_roles',
    ]:
        op.drop_table(table)
