"""Calendar events, participants and Google Calendar sync log

Revision ID: 9d3e5b7a2c41
Revises: 4c1f2a9e7b10
Create Date: 2026-10-19 15:40:27.901344

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9d3e5b7a2c41'
down_revision = '4c1f2a9e7b10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('calendar_events',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('organizer_id', sa.String(length=36), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('event_type', sa.String(length=30), nullable=False),
    sa.Column('start_datetime', sa.DateTime(), nullable=False),
    sa.Column('end_datetime', sa.DateTime(), nullable=False),
    sa.Column('all_day', sa.Boolean(), nullable=False),
    sa.Column('location', sa.String(length=255), nullable=True),
    sa.Column('max_participants', sa.Integer(), nullable=True),
    sa.Column('visibility', sa.String(length=20), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('color', sa.String(length=7), nullable=True),
    sa.Column('source', sa.String(length=20), nullable=False),
    sa.Column('external_id', sa.String(length=255), nullable=True),
    sa.Column('external_link', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.CheckConstraint("event_type IN ('training','competition','individual_session','meeting','other')"),
    sa.CheckConstraint("visibility IN ('public','private','coaches_only')"),
    sa.CheckConstraint("status IN ('active','cancelled','completed')"),
    sa.CheckConstraint('end_datetime > start_datetime', name='ck_calendar_events_ends_after_start'),
    sa.CheckConstraint('max_participants IS NULL OR max_participants > 0', name='ck_calendar_events_capacity'),
    sa.ForeignKeyConstraint(['organizer_id'], ['profiles.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('organizer_id', 'external_id', name='uq_calendar_events_organizer_external')
    )
    op.create_index(op.f('ix_calendar_events_organizer_id'), 'calendar_events', ['organizer_id'], unique=False)
    op.create_index(op.f('ix_calendar_events_start_datetime'), 'calendar_events', ['start_datetime'], unique=False)
    op.create_index(op.f('ix_calendar_events_status'), 'calendar_events', ['status'], unique=False)
    op.create_index(op.f('ix_calendar_events_external_id'), 'calendar_events', ['external_id'], unique=False)

    op.create_table('calendar_event_participants',
    sa.Column('event_id', sa.String(length=36), nullable=False),
    sa.Column('participant_id', sa.String(length=36), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('coach_notes', sa.Text(), nullable=True),
    sa.Column('responded_at', sa.DateTime(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.CheckConstraint("status IN ('invited','accepted','declined','maybe','attended','absent')"),
    sa.ForeignKeyConstraint(['event_id'], ['calendar_events.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['participant_id'], ['profiles.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('event_id', 'participant_id')
    )
    op.create_index(op.f('ix_calendar_event_participants_participant_id'), 'calendar_event_participants', ['participant_id'], unique=False)

    op.create_table('google_calendar_syncs',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.String(length=36), nullable=False),
    sa.Column('imported_count', sa.Integer(), nullable=False),
    sa.Column('updated_count', sa.Integer(), nullable=False),
    sa.Column('error_count', sa.Integer(), nullable=False),
    sa.Column('errors', sa.JSON(), nullable=True),
    sa.Column('synced_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['user_id'], ['accounts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_google_calendar_syncs_user_id'), 'google_calendar_syncs', ['user_id'], unique=False)
    op.create_index(op.f('ix_google_calendar_syncs_synced_at'), 'google_calendar_syncs', ['synced_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_google_calendar_syncs_synced_at'), table_name='google_calendar_syncs')
    op.drop_index(op.f('ix_google_calendar_syncs_user_id'), table_name='google_calendar_syncs')
    op.drop_table('google_calendar_syncs')
    op.drop_index(op.f('ix_calendar_event_participants_participant_id'), table_name='calendar_event_participants')
    op.drop_table('calendar_event_participants')
    op.drop_index(op.f('ix_calendar_events_external_id'), table_name='calendar_events')
    op.drop_index(op.f('ix_calendar_events_status'), table_name='calendar_events')
    op.drop_index(op.f('ix_calendar_events_start_datetime'), table_name='calendar_events')
    op.drop_index(op.f('ix_calendar_events_organizer_id'), table_name='calendar_events')
    op.drop_table('calendar_events')
