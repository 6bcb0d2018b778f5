"""initial schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:12:44.104512

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLE = sa.Enum('ADMIN', 'SUPERVISOR', 'TECHNICIAN', 'VIEWER', name='userrole')
ACCOUNT_STATUS = sa.Enum('ACTIVE', 'PENDING', 'INACTIVE', name='accountstatus')
QR_STATUS = sa.Enum('ACTIVE', 'INACTIVE', 'MAINTENANCE', name='qrstatus')
INSPECTION_TYPE = sa.Enum(
    'ROUTINE', 'SPECIAL', 'EMERGENCY', 'MAINTENANCE', name='inspectiontype')
INSPECTION_STATUS = sa.Enum(
    'PENDING', 'COMPLETED', 'CANCELLED', name='inspectionstatus')
MAINTENANCE_TYPE = sa.Enum(
    'PREVENTIVE', 'CORRECTIVE', 'EMERGENCY', 'REPLACEMENT', name='maintenancetype')
MAINTENANCE_STATUS = sa.Enum(
    'SCHEDULED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED', name='maintenancestatus')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'user',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('hashed_password', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('employee_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('department', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('zone', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('division', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('status', ACCOUNT_STATUS, nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)
    op.create_index(op.f('ix_user_employee_id'), 'user', ['employee_id'], unique=True)

    op.create_table(
        'trackfitting',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('part_number', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('manufacturer', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('material', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('dimensions', sa.JSON(), nullable=True),
        sa.Column('specifications', sa.JSON(), nullable=True),
        sa.Column('safety_standards', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_trackfitting_part_number'),
                    'trackfitting', ['part_number'], unique=True)
    op.create_index(op.f('ix_trackfitting_name'), 'trackfitting', ['name'])
    op.create_index(op.f('ix_trackfitting_category'), 'trackfitting', ['category'])

    op.create_table(
        'qrcode',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('qr_code', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('fitting_id', sa.Uuid(), nullable=False),
        sa.Column('batch_number', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('manufacturing_date', sa.Date(), nullable=True),
        sa.Column('installation_date', sa.Date(), nullable=True),
        sa.Column('zone', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('division', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('section', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('km_post', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('track_number', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('location_details', sa.JSON(), nullable=True),
        sa.Column('status', QR_STATUS, nullable=False),
        sa.Column('qr_image_url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['fitting_id'], ['trackfitting.id']),
        sa.ForeignKeyConstraint(['created_by'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_qrcode_qr_code'), 'qrcode', ['qr_code'], unique=True)
    op.create_index(op.f('ix_qrcode_fitting_id'), 'qrcode', ['fitting_id'])
    op.create_index(op.f('ix_qrcode_zone'), 'qrcode', ['zone'])
    op.create_index(op.f('ix_qrcode_division'), 'qrcode', ['division'])
    op.create_index(op.f('ix_qrcode_section'), 'qrcode', ['section'])
    op.create_index(op.f('ix_qrcode_status'), 'qrcode', ['status'])

    op.create_table(
        'inspection',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('qr_code_id', sa.Uuid(), nullable=False),
        sa.Column('inspector_id', sa.Uuid(), nullable=True),
        sa.Column('inspection_date', sa.DateTime(), nullable=False),
        sa.Column('inspection_type', INSPECTION_TYPE, nullable=False),
        sa.Column('condition_rating', sa.Integer(), nullable=False),
        sa.Column('observations', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('defects_found', sa.JSON(), nullable=True),
        sa.Column('recommendations', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('next_inspection_due', sa.Date(), nullable=True),
        sa.Column('status', INSPECTION_STATUS, nullable=False),
        sa.ForeignKeyConstraint(['qr_code_id'], ['qrcode.id']),
        sa.ForeignKeyConstraint(['inspector_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inspection_qr_code_id'), 'inspection', ['qr_code_id'])
    op.create_index(op.f('ix_inspection_inspector_id'), 'inspection', ['inspector_id'])
    op.create_index(op.f('ix_inspection_inspection_date'),
                    'inspection', ['inspection_date'])

    op.create_table(
        'maintenancerecord',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('qr_code_id', sa.Uuid(), nullable=False),
        sa.Column('technician_id', sa.Uuid(), nullable=True),
        sa.Column('maintenance_date', sa.DateTime(), nullable=False),
        sa.Column('maintenance_type', MAINTENANCE_TYPE, nullable=False),
        sa.Column('work_description', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('parts_used', sa.JSON(), nullable=True),
        sa.Column('labor_hours', sa.Float(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('status', MAINTENANCE_STATUS, nullable=False),
        sa.ForeignKeyConstraint(['qr_code_id'], ['qrcode.id']),
        sa.ForeignKeyConstraint(['technician_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_maintenancerecord_qr_code_id'),
                    'maintenancerecord', ['qr_code_id'])
    op.create_index(op.f('ix_maintenancerecord_technician_id'),
                    'maintenancerecord', ['technician_id'])
    op.create_index(op.f('ix_maintenancerecord_maintenance_date'),
                    'maintenancerecord', ['maintenance_date'])

    op.create_table(
        'auditlog',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('qr_code_id', sa.Uuid(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('action', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['qr_code_id'], ['qrcode.id']),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_auditlog_qr_code_id'), 'auditlog', ['qr_code_id'])
    op.create_index(op.f('ix_auditlog_user_id'), 'auditlog', ['user_id'])
    op.create_index(op.f('ix_auditlog_action'), 'auditlog', ['action'])
    op.create_index(op.f('ix_auditlog_created_at'), 'auditlog', ['created_at'])


def downgrade():
    op.drop_table('auditlog')
    op.drop_table('maintenancerecord')
    op.drop_table('inspection')
    op.drop_table('qrcode')
    op.drop_table('trackfitting')
    op.drop_table('user')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum in (MAINTENANCE_STATUS, MAINTENANCE_TYPE, INSPECTION_STATUS,
                     INSPECTION_TYPE, QR_STATUS, ACCOUNT_STATUS, USER_ROLE):
            enum.drop(bind, checkfirst=True)
