"""Initial migration - create every table

Revision ID: 001_initial
Revises: 
Create Date: 2026-01-15 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Enum columns store the member names, as SQLModel maps them
bed_status = sa.Enum('AVAILABLE', 'OCCUPIED', 'MAINTENANCE', name='bedstatusenum')
gender = sa.Enum('MALE', 'FEMALE', 'OTHER', name='genderenum')
bill_status = sa.Enum('DRAFT', 'GENERATED', 'SENT', 'PAID', 'CANCELLED', name='billstatusenum')
role = sa.Enum('ADMIN', 'DOCTOR', 'NURSE', 'RECEPTIONIST', 'BILLING', name='roleenum')


def upgrade() -> None:
    """Creates every table of the system."""

    # Hospital
    op.create_table(
        'hospital',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index('ix_hospital_name', 'hospital', ['name'])

    # Department
    op.create_table(
        'department',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('hospital_id', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['hospital_id'], ['hospital.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_department_hospital_id', 'department', ['hospital_id'])

    # Patient
    op.create_table(
        'patient',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', gender, nullable=False),
        sa.Column('contact_number', sa.String(), nullable=False),
        sa.Column('emergency_contact_name', sa.String(), nullable=False),
        sa.Column('emergency_contact_relationship', sa.String(), nullable=False),
        sa.Column('emergency_contact_number', sa.String(), nullable=False),
        sa.Column('active_admission_id', sa.String(), nullable=True),
        sa.Column('bill_status', bill_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_patient_last_name', 'patient', ['last_name'])
    op.create_index('ix_patient_active_admission_id', 'patient', ['active_admission_id'])

    # Bed
    op.create_table(
        'bed',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('department_id', sa.String(), nullable=False),
        sa.Column('status', bed_status, nullable=False),
        sa.Column('current_patient_id', sa.String(), nullable=True),
        sa.Column('status_updated_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, default=0),
        sa.ForeignKeyConstraint(['department_id'], ['department.id']),
        sa.ForeignKeyConstraint(['current_patient_id'], ['patient.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('current_patient_id')
    )
    op.create_index('ix_bed_label', 'bed', ['label'])
    op.create_index('ix_bed_department_id', 'bed', ['department_id'])
    op.create_index('ix_bed_status', 'bed', ['status'])

    # Admission
    op.create_table(
        'admission',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=False),
        sa.Column('department_id', sa.String(), nullable=False),
        sa.Column('bed_id', sa.String(), nullable=False),
        sa.Column('reason', sa.String(), nullable=False),
        sa.Column('admitted_at', sa.DateTime(), nullable=False),
        sa.Column('discharged_at', sa.DateTime(), nullable=True),
        sa.Column('transfer_count', sa.Integer(), nullable=False, default=0),
        sa.Column('last_transferred_at', sa.DateTime(), nullable=True),
        sa.Column('admitted_by', sa.String(), nullable=True),
        sa.Column('discharged_by', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id']),
        sa.ForeignKeyConstraint(['department_id'], ['department.id']),
        sa.ForeignKeyConstraint(['bed_id'], ['bed.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admission_patient_id', 'admission', ['patient_id'])
    op.create_index('ix_admission_department_id', 'admission', ['department_id'])
    op.create_index('ix_admission_bed_id', 'admission', ['bed_id'])
    op.create_index('ix_admission_admitted_at', 'admission', ['admitted_at'])
    op.create_index('ix_admission_discharged_at', 'admission', ['discharged_at'])

    # Bill
    op.create_table(
        'bill',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=False),
        sa.Column('admission_id', sa.String(), nullable=True),
        sa.Column('status', bill_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('status_updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id']),
        sa.ForeignKeyConstraint(['admission_id'], ['admission.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_bill_patient_id', 'bill', ['patient_id'])
    op.create_index('ix_bill_admission_id', 'bill', ['admission_id'])
    op.create_index('ix_bill_status', 'bill', ['status'])

    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', role, nullable=False),
        sa.Column('hospital_id', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['hospital_id'], ['hospital.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)


def downgrade() -> None:
    """Drops every table of the system."""
    op.drop_table('users')
    op.drop_table('bill')
    op.drop_table('admission')
    op.drop_table('bed')
    op.drop_table('patient')
    op.drop_table('department')
    op.drop_table('hospital')
