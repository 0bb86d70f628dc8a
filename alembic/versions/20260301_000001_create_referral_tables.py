"""Create referral tables

Revision ID: 20260301_000001
Revises:
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260301_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create profiles table
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('middle_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('tracking_code', sa.String(32), nullable=True),
        sa.Column('custom_tracking_code', sa.String(32), nullable=True),
        sa.Column('tracking_code_finalized', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('commission_rate', sa.DECIMAL(6, 4), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_profiles_username', 'profiles', ['username'], unique=True)
    op.create_index('ix_profiles_email', 'profiles', ['email'])
    op.create_index('ix_profiles_role', 'profiles', ['role'])
    op.create_index('ix_profiles_tracking_code', 'profiles', ['tracking_code'], unique=True)
    op.create_index('ix_profiles_custom_tracking_code', 'profiles', ['custom_tracking_code'], unique=True)

    # Create leads table
    op.create_table(
        'leads',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='NEW'),
        sa.Column('referrer_username', sa.String(64), nullable=True),
        sa.Column('referrer_type', sa.String(20), nullable=True),
        sa.Column('attribution_method', sa.String(20), nullable=True),
        sa.Column('attribution_confidence', sa.String(10), nullable=True),
        sa.Column('commission_rate', sa.DECIMAL(6, 4), nullable=True),
        sa.Column('commission_rate_locked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_leads_email_created', 'leads', ['email', 'created_at'])
    op.create_index('idx_leads_phone_created', 'leads', ['phone', 'created_at'])
    op.create_index('idx_leads_ip_created', 'leads', ['ip_address', 'created_at'])
    op.create_index('idx_leads_referrer_method', 'leads', ['referrer_username', 'attribution_method'])

    # Create payout_requests table
    op.create_table(
        'payout_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(32), nullable=False),
        sa.Column('payment_details', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('commission_ids', sa.JSON(), nullable=False),
        sa.Column('payment_ref', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('processed_by', sa.Integer(), nullable=True),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('amount > 0', name='check_payout_amount_positive'),
        sa.ForeignKeyConstraint(['referrer_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['processed_by'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_payout_requests_status', 'payout_requests', ['status'])
    op.create_index('idx_payout_requests_referrer_status', 'payout_requests', ['referrer_id', 'status'])

    # Create commissions table
    op.create_table(
        'commissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('lead_id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.String(128), nullable=False),
        sa.Column('transaction_amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('rate', sa.DECIMAL(6, 4), nullable=False),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('payout_request_id', sa.Integer(), nullable=True),
        sa.Column('payment_ref', sa.String(255), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('amount >= 0', name='check_commission_amount_non_negative'),
        sa.ForeignKeyConstraint(['referrer_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ),
        sa.ForeignKeyConstraint(['payout_request_id'], ['payout_requests.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_id')
    )
    op.create_index('ix_commissions_lead_id', 'commissions', ['lead_id'])
    op.create_index('idx_commissions_referrer_status', 'commissions', ['referrer_id', 'status'])
    op.create_index('idx_commissions_payout', 'commissions', ['payout_request_id'])

    # Create fraud_check_logs table
    op.create_table(
        'fraud_check_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('referrer_username', sa.String(64), nullable=True),
        sa.Column('risk_score', sa.Integer(), nullable=False),
        sa.Column('flags', sa.JSON(), nullable=False),
        sa.Column('blocked_reason', sa.Text(), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_fraud_check_logs_ip_address', 'fraud_check_logs', ['ip_address'])

    # Create document_folders table
    op.create_table(
        'document_folders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['parent_id'], ['document_folders.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_document_folders_owner_id', 'document_folders', ['owner_id'])
    op.create_index('ix_document_folders_parent_id', 'document_folders', ['parent_id'])

    # Create documents table
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('folder_id', sa.Integer(), nullable=True),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('storage_key', sa.String(512), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['folder_id'], ['document_folders.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_documents_owner_id', 'documents', ['owner_id'])
    op.create_index('ix_documents_folder_id', 'documents', ['folder_id'])


def downgrade() -> None:
    op.drop_index('ix_documents_folder_id', 'documents')
    op.drop_index('ix_documents_owner_id', 'documents')
    op.drop_table('documents')

    op.drop_index('ix_document_folders_parent_id', 'document_folders')
    op.drop_index('ix_document_folders_owner_id', 'document_folders')
    op.drop_table('document_folders')

    op.drop_index('ix_fraud_check_logs_ip_address', 'fraud_check_logs')
    op.drop_table('fraud_check_logs')

    op.drop_index('idx_commissions_payout', 'commissions')
    op.drop_index('idx_commissions_referrer_status', 'commissions')
    op.drop_index('ix_commissions_lead_id', 'commissions')
    op.drop_table('commissions')

    op.drop_index('idx_payout_requests_referrer_status', 'payout_requests')
    op.drop_index('ix_payout_requests_status', 'payout_requests')
    op.drop_table('payout_requests')

    op.drop_index('idx_leads_referrer_method', 'leads')
    op.drop_index('idx_leads_ip_created', 'leads')
    op.drop_index('idx_leads_phone_created', 'leads')
    op.drop_index('idx_leads_email_created', 'leads')
    op.drop_table('leads')

    op.drop_index('ix_profiles_custom_tracking_code', 'profiles')
    op.drop_index('ix_profiles_tracking_code', 'profiles')
    op.drop_index('ix_profiles_role', 'profiles')
    op.drop_index('ix_profiles_email', 'profiles')
    op.drop_index('ix_profiles_username', 'profiles')
    op.drop_table('profiles')
