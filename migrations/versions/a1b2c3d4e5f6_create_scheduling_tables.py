"""create scheduling tables

Revision ID: a1b2c3d4e5f6
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'availability_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('therapist_id', sa.String(length=64), nullable=False),
        sa.Column('day_of_week', sa.String(length=10), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column('session_duration', sa.Integer(), nullable=False),
        sa.Column('break_time', sa.Integer(), nullable=False),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('state_changed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('availability_templates', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_availability_templates_therapist_id'), ['therapist_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_availability_templates_state'), ['state'], unique=False)

    op.create_table(
        'slots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('therapist_id', sa.String(length=64), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column('is_booked', sa.Boolean(), nullable=False),
        sa.Column('booked_by', sa.String(length=64), nullable=True),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('state_changed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['template_id'], ['availability_templates.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('slots', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_slots_therapist_id'), ['therapist_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_slots_template_id'), ['template_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_slots_date'), ['date'], unique=False)
        batch_op.create_index('ix_slots_date_is_booked', ['date', 'is_booked'], unique=False)
        batch_op.create_index(
            'uq_slot_therapist_date_start_active',
            ['therapist_id', 'date', 'start_time'],
            unique=True,
            sqlite_where=sa.text("state = 'active'"),
            postgresql_where=sa.text("state = 'active'"),
        )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_ref', sa.String(length=32), nullable=False),
        sa.Column('patient_id', sa.String(length=64), nullable=False),
        sa.Column('therapist_id', sa.String(length=64), nullable=False),
        sa.Column('slot_id', sa.Integer(), nullable=False),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('session_start_time', sa.String(length=5), nullable=False),
        sa.Column('session_end_time', sa.String(length=5), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('cancellation_reason', sa.String(length=255), nullable=True),
        sa.Column('cancelled_by', sa.String(length=64), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['slot_id'], ['slots.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('bookings', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_bookings_booking_ref'), ['booking_ref'], unique=True)
        batch_op.create_index(batch_op.f('ix_bookings_patient_id'), ['patient_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_bookings_therapist_id'), ['therapist_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_bookings_slot_id'), ['slot_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_bookings_session_date'), ['session_date'], unique=False)
        batch_op.create_index(batch_op.f('ix_bookings_status'), ['status'], unique=False)
        batch_op.create_index(
            'uq_booking_active_slot',
            ['slot_id'],
            unique=True,
            sqlite_where=sa.text("status != 'cancelled'"),
            postgresql_where=sa.text("status != 'cancelled'"),
        )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sa.String(length=64), nullable=True),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('entity', sa.String(length=80), nullable=True),
        sa.Column('entity_id', sa.String(length=80), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('metadata_json', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade():
    op.drop_table('audit_logs')

    with op.batch_alter_table('bookings', schema=None) as batch_op:
        batch_op.drop_index('uq_booking_active_slot')
        batch_op.drop_index(batch_op.f('ix_bookings_status'))
        batch_op.drop_index(batch_op.f('ix_bookings_session_date'))
        batch_op.drop_index(batch_op.f('ix_bookings_slot_id'))
        batch_op.drop_index(batch_op.f('ix_bookings_therapist_id'))
        batch_op.drop_index(batch_op.f('ix_bookings_patient_id'))
        batch_op.drop_index(batch_op.f('ix_bookings_booking_ref'))
    op.drop_table('bookings')

    with op.batch_alter_table('slots', schema=None) as batch_op:
        batch_op.drop_index('uq_slot_therapist_date_start_active')
        batch_op.drop_index('ix_slots_date_is_booked')
        batch_op.drop_index(batch_op.f('ix_slots_date'))
        batch_op.drop_index(batch_op.f('ix_slots_template_id'))
        batch_op.drop_index(batch_op.f('ix_slots_therapist_id'))
    op.drop_table('slots')

    with op.batch_alter_table('availability_templates', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_availability_templates_state'))
        batch_op.drop_index(batch_op.f('ix_availability_templates_therapist_id'))
    op.drop_table('availability_templates')
