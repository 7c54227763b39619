"""Schemas for youth profiles."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class YouthProfileRead(BaseModel):
    id: UUID
    tracking_id: str
    full_name: str
    date_of_birth: date
    age: int
    sex: str | None
    civil_status: str
    profile_picture: str | None
    mobile_number: str | None
    email_address: str | None
    barangay: str | None
    street_address: str | None
    education_level: str | None
    school_name: str | None
    course_strand: str | None
    grade_level: str | None
    is_graduated: bool
    last_school_year: str | None
    skills: str
    hobbies: str
    preferred_programs: str
    is_employed: bool
    occupation: str | None
    working_hours: str | None
    sk_membership: bool
    volunteer_experience: str
    leadership_roles: str
    is_pwd: bool
    pwd_type: str | None
    indigenous_group: str | None
    is_solo_parent: bool
    special_cases: str | None
    emergency_contact_person: str | None
    emergency_contact_number: str | None
    emergency_relationship: str | None
    latitude: float | None
    longitude: float | None
    status: str
    committee: str
    participation: int
    date_of_registration: date
    last_activity: date
    created_at: datetime

    model_config = {"from_attributes": True}


class AutoCreateRequest(BaseModel):
    submission_id: UUID
    form_title: str | None = None


class AutoCreateResponse(BaseModel):
    success: bool = True
    message: str = "Youth profile created successfully from form submission"
    youth_profile: YouthProfileRead
