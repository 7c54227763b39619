"""Baseline migration - programs, forms, submissions, revenue and youth profiles

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Portable DDL (no PostgreSQL extensions) so the same revision runs on SQLite
for local development.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Users, programs, events
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'programs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('program_id', sa.Uuid(), sa.ForeignKey('programs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('date_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_events_program', 'events', ['program_id'])

    # ==========================================================================
    # Forms and submissions
    # ==========================================================================
    op.create_table(
        'forms',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('fields', sa.Text(), nullable=False),
        sa.Column('file_upload', sa.Boolean(), nullable=False),
        sa.Column('gcash_receipt', sa.Boolean(), nullable=False),
        sa.Column('qr_code_image', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('publish_status', sa.String(20), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column('submission_limit', sa.Integer(), nullable=True),
        sa.Column('submission_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('event_id', sa.Uuid(), sa.ForeignKey('events.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_forms_event', 'forms', ['event_id'])
    op.create_index('idx_forms_publish_status', 'forms', ['publish_status'])

    op.create_table(
        'form_submissions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('form_id', sa.Uuid(), sa.ForeignKey('forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_by', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('idx_form_submissions_form', 'form_submissions', ['form_id'])
    op.create_index('idx_form_submissions_status', 'form_submissions', ['status'])

    # ==========================================================================
    # Revenue
    # ==========================================================================
    op.create_table(
        'revenues',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('source', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('receipt', sa.String(512), nullable=True),
        sa.Column('program_id', sa.Uuid(), sa.ForeignKey('programs.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'form_submission_id',
            sa.Uuid(),
            sa.ForeignKey('form_submissions.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_revenues_program', 'revenues', ['program_id'])
    op.create_index('idx_revenues_submission_source', 'revenues', ['form_submission_id', 'source'])

    # ==========================================================================
    # Youth profiles
    # ==========================================================================
    op.create_table(
        'youth_profiles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tracking_id', sa.String(20), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('sex', sa.String(20), nullable=True),
        sa.Column('civil_status', sa.String(50), nullable=False),
        sa.Column('profile_picture', sa.String(512), nullable=True),
        sa.Column('mobile_number', sa.String(50), nullable=True),
        sa.Column('email_address', sa.String(255), nullable=True),
        sa.Column('barangay', sa.String(100), nullable=True),
        sa.Column('street_address', sa.String(255), nullable=True),
        sa.Column('education_level', sa.String(100), nullable=True),
        sa.Column('school_name', sa.String(255), nullable=True),
        sa.Column('course_strand', sa.String(255), nullable=True),
        sa.Column('grade_level', sa.String(50), nullable=True),
        sa.Column('is_graduated', sa.Boolean(), nullable=False),
        sa.Column('last_school_year', sa.String(50), nullable=True),
        sa.Column('skills', sa.Text(), nullable=False),
        sa.Column('hobbies', sa.Text(), nullable=False),
        sa.Column('preferred_programs', sa.Text(), nullable=False),
        sa.Column('is_employed', sa.Boolean(), nullable=False),
        sa.Column('occupation', sa.String(255), nullable=True),
        sa.Column('working_hours', sa.String(100), nullable=True),
        sa.Column('sk_membership', sa.Boolean(), nullable=False),
        sa.Column('volunteer_experience', sa.Text(), nullable=False),
        sa.Column('leadership_roles', sa.Text(), nullable=False),
        sa.Column('is_pwd', sa.Boolean(), nullable=False),
        sa.Column('pwd_type', sa.String(100), nullable=True),
        sa.Column('indigenous_group', sa.String(100), nullable=True),
        sa.Column('is_solo_parent', sa.Boolean(), nullable=False),
        sa.Column('special_cases', sa.Text(), nullable=True),
        sa.Column('emergency_contact_person', sa.String(255), nullable=True),
        sa.Column('emergency_contact_number', sa.String(50), nullable=True),
        sa.Column('emergency_relationship', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('committee', sa.String(100), nullable=False),
        sa.Column('participation', sa.Integer(), nullable=False),
        sa.Column('date_of_registration', sa.Date(), nullable=False),
        sa.Column('last_activity', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'idx_youth_identity', 'youth_profiles', ['full_name', 'mobile_number', 'date_of_birth']
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('youth_profiles')
    op.drop_table('revenues')
    op.drop_table('form_submissions')
    op.drop_table('forms')
    op.drop_table('events')
    op.drop_table('programs')
    op.drop_table('users')
