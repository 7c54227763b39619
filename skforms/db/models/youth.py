"""SQLAlchemy ORM models for youth demographic profiles."""

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from skforms.db.base import Base, utcnow
from skforms.db.enums import DEFAULT_CIVIL_STATUS, DEFAULT_COMMITTEE, YouthProfileStatus


class YouthProfile(Base):
    """
    Demographic record of a registered youth.

    There is no unique key on identity. Duplicates are guarded heuristically
    on (full_name, mobile_number, date_of_birth) at creation time.
    """

    __tablename__ = "youth_profiles"
    __table_args__ = (
        Index("idx_youth_identity", "full_name", "mobile_number", "date_of_birth"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tracking_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)

    # Basic information
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    sex: Mapped[str | None] = mapped_column(String(20), nullable=True)
    civil_status: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_CIVIL_STATUS, nullable=False
    )
    profile_picture: Mapped[str | None] = mapped_column(String(512), nullable=True)
    mobile_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Address
    barangay: Mapped[str | None] = mapped_column(String(100), nullable=True)
    street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Education
    education_level: Mapped[str | None] = mapped_column(String(100), nullable=True)
    school_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    course_strand: Mapped[str | None] = mapped_column(String(255), nullable=True)
    grade_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_graduated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_school_year: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Skills and interests
    skills: Mapped[str] = mapped_column(Text, default="", nullable=False)
    hobbies: Mapped[str] = mapped_column(Text, default="", nullable=False)
    preferred_programs: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Employment
    is_employed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    occupation: Mapped[str | None] = mapped_column(String(255), nullable=True)
    working_hours: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # SK involvement
    sk_membership: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    volunteer_experience: Mapped[str] = mapped_column(Text, default="", nullable=False)
    leadership_roles: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Special cases
    is_pwd: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    pwd_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    indigenous_group: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_solo_parent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    special_cases: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Emergency contact
    emergency_contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_contact_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    emergency_relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Location
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Membership
    status: Mapped[str] = mapped_column(
        String(20), default=YouthProfileStatus.ACTIVE.value, nullable=False
    )
    committee: Mapped[str] = mapped_column(String(100), default=DEFAULT_COMMITTEE, nullable=False)
    participation: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    date_of_registration: Mapped[date] = mapped_column(Date, nullable=False)
    last_activity: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )
