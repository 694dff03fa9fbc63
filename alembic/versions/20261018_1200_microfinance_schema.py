"""create microfinance loan management schema

Revision ID: 20261018_1200_microfinance
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_1200_microfinance'
down_revision = None
branch_labels = None
depends_on = None

LOAN_STATUS = sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'COMPLETED', name='loanstatus')
REPAYMENT_STATUS = sa.Enum('PENDING', 'PARTIAL', 'PAID', name='repaymentstatus')


def upgrade() -> None:
    # ============================================================
    # Organization
    # ============================================================
    op.create_table(
        'regions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index(op.f('ix_regions_id'), 'regions', ['id'], unique=False)

    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('location', sa.String(length=150), nullable=False),
        sa.Column('region_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_branches_id'), 'branches', ['id'], unique=False)
    op.create_index(op.f('ix_branches_region_id'), 'branches', ['region_id'], unique=False)

    op.create_table(
        'staff',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_staff_id'), 'staff', ['id'], unique=False)
    op.create_index(op.f('ix_staff_branch_id'), 'staff', ['branch_id'], unique=False)

    # ============================================================
    # Borrowers & Guarantors
    # ============================================================
    op.create_table(
        'borrowers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('contact', sa.String(length=50), nullable=False),
        sa.Column('income', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('region_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_borrowers_id'), 'borrowers', ['id'], unique=False)
    op.create_index(op.f('ix_borrowers_region_id'), 'borrowers', ['region_id'], unique=False)

    op.create_table(
        'guarantors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('contact', sa.String(length=50), nullable=False),
        sa.Column('relation', sa.String(length=50), nullable=False),
        sa.Column('borrower_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['borrower_id'], ['borrowers.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_guarantors_id'), 'guarantors', ['id'], unique=False)
    op.create_index(op.f('ix_guarantors_borrower_id'), 'guarantors', ['borrower_id'], unique=False)

    # ============================================================
    # Loans
    # ============================================================
    op.create_table(
        'loans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('borrower_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('interest_rate', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('tenure', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('status', LOAN_STATUS, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['borrower_id'], ['borrowers.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_loans_id'), 'loans', ['id'], unique=False)
    op.create_index(op.f('ix_loans_borrower_id'), 'loans', ['borrower_id'], unique=False)
    op.create_index(op.f('ix_loans_status'), 'loans', ['status'], unique=False)

    op.create_table(
        'loan_approvals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('loan_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=False),
        sa.Column('approval_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.id'], ),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('loan_id')
    )
    op.create_index(op.f('ix_loan_approvals_id'), 'loan_approvals', ['id'], unique=False)
    op.create_index(op.f('ix_loan_approvals_staff_id'), 'loan_approvals', ['staff_id'], unique=False)
    op.create_index(op.f('ix_loan_approvals_branch_id'), 'loan_approvals', ['branch_id'], unique=False)

    op.create_table(
        'loan_guarantors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('loan_id', sa.Integer(), nullable=False),
        sa.Column('guarantor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.id'], ),
        sa.ForeignKeyConstraint(['guarantor_id'], ['guarantors.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('loan_id', 'guarantor_id', name='uq_loan_guarantor')
    )
    op.create_index(op.f('ix_loan_guarantors_id'), 'loan_guarantors', ['id'], unique=False)
    op.create_index(op.f('ix_loan_guarantors_loan_id'), 'loan_guarantors', ['loan_id'], unique=False)
    op.create_index(op.f('ix_loan_guarantors_guarantor_id'), 'loan_guarantors', ['guarantor_id'], unique=False)

    # ============================================================
    # Repayment Schedule
    # ============================================================
    op.create_table(
        'repayments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('loan_id', sa.Integer(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('amount_due', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('amount_paid', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0.00'),
        sa.Column('penalty', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0.00'),
        sa.Column('status', REPAYMENT_STATUS, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_repayments_id'), 'repayments', ['id'], unique=False)
    op.create_index(op.f('ix_repayments_loan_id'), 'repayments', ['loan_id'], unique=False)
    op.create_index(op.f('ix_repayments_due_date'), 'repayments', ['due_date'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_repayments_due_date'), table_name='repayments')
    op.drop_index(op.f('ix_repayments_loan_id'), table_name='repayments')
    op.drop_index(op.f('ix_repayments_id'), table_name='repayments')
    op.drop_table('repayments')

    op.drop_index(op.f('ix_loan_guarantors_guarantor_id'), table_name='loan_guarantors')
    op.drop_index(op.f('ix_loan_guarantors_loan_id'), table_name='loan_guarantors')
    op.drop_index(op.f('ix_loan_guarantors_id'), table_name='loan_guarantors')
    op.drop_table('loan_guarantors')

    op.drop_index(op.f('ix_loan_approvals_branch_id'), table_name='loan_approvals')
    op.drop_index(op.f('ix_loan_approvals_staff_id'), table_name='loan_approvals')
    op.drop_index(op.f('ix_loan_approvals_id'), table_name='loan_approvals')
    op.drop_table('loan_approvals')

    op.drop_index(op.f('ix_loans_status'), table_name='loans')
    op.drop_index(op.f('ix_loans_borrower_id'), table_name='loans')
    op.drop_index(op.f('ix_loans_id'), table_name='loans')
    op.drop_table('loans')

    op.drop_index(op.f('ix_guarantors_borrower_id'), table_name='guarantors')
    op.drop_index(op.f('ix_guarantors_id'), table_name='guarantors')
    op.drop_table('guarantors')

    op.drop_index(op.f('ix_borrowers_region_id'), table_name='borrowers')
    op.drop_index(op.f('ix_borrowers_id'), table_name='borrowers')
    op.drop_table('borrowers')

    op.drop_index(op.f('ix_staff_branch_id'), table_name='staff')
    op.drop_index(op.f('ix_staff_id'), table_name='staff')
    op.drop_table('staff')

    op.drop_index(op.f('ix_branches_region_id'), table_name='branches')
    op.drop_index(op.f('ix_branches_id'), table_name='branches')
    op.drop_table('branches')

    op.drop_index(op.f('ix_regions_id'), table_name='regions')
    op.drop_table('regions')

    # Drop enums
    op.execute('DROP TYPE IF EXISTS repaymentstatus')
    op.execute('DROP TYPE IF EXISTS loanstatus')
