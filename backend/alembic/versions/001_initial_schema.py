# backend/alembic/versions/001_initial_schema.py
"""Initial schema - profiles, bookings, DBS checks, notifications

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-06 00:00:00.000000

Creates every table in its final form: users, tutor profiles, children,
bookings, DBS checks, notifications, progress reports and reviews.

Status and type columns are VARCHAR with CHECK constraints rather than
database ENUMs so values can be added without a type migration.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create the TutorHub schema."""
    print("Creating users and tutor profiles...")

    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(120), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("user_type", sa.String(20), nullable=False, server_default="parent"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "user_type IN ('parent', 'teacher', 'school', 'admin')",
            name="ck_users_user_type",
        ),
        comment="Profiles for parents, tutors, schools and admins",
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_user_type", "users", ["user_type"])

    op.create_table(
        "tutor_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("levels", sa.JSON(), nullable=False),
        sa.Column("location", sa.String(120), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("years_experience >= 0", name="ck_tutor_profiles_experience"),
        sa.CheckConstraint(
            "hourly_rate IS NULL OR hourly_rate >= 0", name="ck_tutor_profiles_rate_non_negative"
        ),
    )
    op.create_index("ix_tutor_profiles_id", "tutor_profiles", ["id"])
    op.create_index("ix_tutor_profiles_user_id", "tutor_profiles", ["user_id"], unique=True)
    op.create_index("ix_tutor_profiles_location", "tutor_profiles", ["location"])

    print("Creating children and bookings...")

    op.create_table(
        "children",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("parent_id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("school_year", sa.String(50), nullable=True),
        sa.Column("special_needs", sa.Text(), nullable=True),
        sa.Column("subjects_of_interest", sa.JSON(), nullable=False),
        sa.Column("learning_style", sa.String(50), nullable=True),
        sa.Column("academic_levels", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("age IS NULL OR age >= 0", name="ck_children_age"),
    )
    op.create_index("ix_children_id", "children", ["id"])
    op.create_index("ix_children_parent_id", "children", ["parent_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_reference", sa.String(20), nullable=False),
        sa.Column("parent_id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("child_id", sa.String(26), nullable=True),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("session_type", sa.String(20), nullable=False, server_default="regular"),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("session_format", sa.String(20), nullable=False, server_default="online"),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("session_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("special_requirements", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("parent_confirmed", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("tutor_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_by_id", sa.String(26), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_reference"),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["child_id"], ["children.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["cancelled_by_id"], ["users.id"]),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'rescheduled', 'no_show')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "session_type IN ('regular', 'trial', 'assessment', 'makeup')",
            name="ck_bookings_session_type",
        ),
        sa.CheckConstraint(
            "session_format IN ('online', 'in-person', 'hybrid')",
            name="ck_bookings_session_format",
        ),
        sa.CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        sa.CheckConstraint(
            "session_fee IS NULL OR session_fee >= 0", name="check_fee_non_negative"
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_parent_id", "bookings", ["parent_id"])
    op.create_index("ix_bookings_tutor_id", "bookings", ["tutor_id"])
    op.create_index("ix_bookings_child_id", "bookings", ["child_id"])
    op.create_index("ix_bookings_subject", "bookings", ["subject"])
    op.create_index("ix_bookings_scheduled_date", "bookings", ["scheduled_date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_tutor_date", "bookings", ["tutor_id", "scheduled_date"])
    op.create_index("ix_bookings_parent_date", "bookings", ["parent_id", "scheduled_date"])

    print("Creating DBS checks...")

    op.create_table(
        "dbs_checks",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("certificate_number", sa.String(50), nullable=False),
        sa.Column("dbs_type", sa.String(20), nullable=False, server_default="enhanced"),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("document_key", sa.String(255), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.Column("content_type", sa.String(100), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_by", sa.String(26), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('pending', 'verified', 'rejected', 'expired')",
            name="ck_dbs_checks_status",
        ),
        sa.CheckConstraint(
            "dbs_type IN ('basic', 'standard', 'enhanced', 'enhanced_barred')",
            name="ck_dbs_checks_type",
        ),
    )
    op.create_index("ix_dbs_checks_id", "dbs_checks", ["id"])
    op.create_index("ix_dbs_checks_tutor_id", "dbs_checks", ["tutor_id"], unique=True)
    op.create_index("ix_dbs_checks_certificate_number", "dbs_checks", ["certificate_number"])
    op.create_index("ix_dbs_checks_status", "dbs_checks", ["status"])

    print("Creating notifications, progress reports and reviews...")

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("notification_type", sa.String(100), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("action_url", sa.String(500), nullable=True),
        sa.Column("related_entity_id", sa.String(26), nullable=True),
        sa.Column("related_entity_type", sa.String(50), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_user_is_read", "notifications", ["user_id", "is_read"])
    op.create_index(
        "ix_notifications_user_created_at",
        "notifications",
        ["user_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "progress_reports",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("child_id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("progress_notes", sa.Text(), nullable=True),
        sa.Column("skills_improved", sa.JSON(), nullable=False),
        sa.Column("areas_for_improvement", sa.JSON(), nullable=False),
        sa.Column("homework_completion", sa.Integer(), nullable=True),
        sa.Column("attendance_rate", sa.Integer(), nullable=True),
        sa.Column("overall_rating", sa.Integer(), nullable=True),
        sa.Column("progress_percentage", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["child_id"], ["children.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "homework_completion IS NULL OR (homework_completion >= 0 AND homework_completion <= 100)",
            name="ck_progress_homework_range",
        ),
        sa.CheckConstraint(
            "attendance_rate IS NULL OR (attendance_rate >= 0 AND attendance_rate <= 100)",
            name="ck_progress_attendance_range",
        ),
        sa.CheckConstraint(
            "overall_rating IS NULL OR (overall_rating >= 1 AND overall_rating <= 5)",
            name="ck_progress_rating_range",
        ),
        sa.CheckConstraint(
            "progress_percentage IS NULL OR (progress_percentage >= 0 AND progress_percentage <= 100)",
            name="ck_progress_percentage_range",
        ),
    )
    op.create_index("ix_progress_reports_id", "progress_reports", ["id"])
    op.create_index("ix_progress_reports_child_id", "progress_reports", ["child_id"])
    op.create_index(
        "ix_progress_reports_child_date", "progress_reports", ["child_id", "session_date"]
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("reviewer_id", sa.String(26), nullable=False),
        sa.Column("child_id", sa.String(26), nullable=True),
        sa.Column("subject", sa.String(100), nullable=True),
        sa.Column("overall_rating", sa.Integer(), nullable=False),
        sa.Column("teaching_quality", sa.Integer(), nullable=True),
        sa.Column("communication", sa.Integer(), nullable=True),
        sa.Column("punctuality", sa.Integer(), nullable=True),
        sa.Column("preparation", sa.Integer(), nullable=True),
        sa.Column("review_title", sa.String(200), nullable=True),
        sa.Column("review_content", sa.Text(), nullable=True),
        sa.Column("what_went_well", sa.Text(), nullable=True),
        sa.Column("areas_for_improvement", sa.Text(), nullable=True),
        sa.Column("would_recommend", sa.Boolean(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_id", name="uq_reviews_booking"),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["child_id"], ["children.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "overall_rating >= 1 AND overall_rating <= 5", name="ck_reviews_rating_range"
        ),
        sa.CheckConstraint(
            "teaching_quality IS NULL OR (teaching_quality >= 1 AND teaching_quality <= 5)",
            name="ck_reviews_teaching_quality_range",
        ),
        sa.CheckConstraint(
            "communication IS NULL OR (communication >= 1 AND communication <= 5)",
            name="ck_reviews_communication_range",
        ),
        sa.CheckConstraint(
            "punctuality IS NULL OR (punctuality >= 1 AND punctuality <= 5)",
            name="ck_reviews_punctuality_range",
        ),
        sa.CheckConstraint(
            "preparation IS NULL OR (preparation >= 1 AND preparation <= 5)",
            name="ck_reviews_preparation_range",
        ),
    )
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("idx_reviews_tutor_approved", "reviews", ["tutor_id", "is_approved"])

    print("Initial schema created")


def downgrade() -> None:
    """Drop the TutorHub schema."""
    print("Dropping TutorHub schema...")

    op.drop_table("reviews")
    op.drop_table("progress_reports")
    op.drop_table("notifications")
    op.drop_table("dbs_checks")
    op.drop_table("bookings")
    op.drop_table("children")
    op.drop_table("tutor_profiles")
    op.drop_table("users")
