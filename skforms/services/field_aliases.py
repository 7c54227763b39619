"""Alias tables used to read submitted data.

The strings below are a wire contract with the form builder and with forms
created before field names were standardised: a key is recognised only if it
matches one of these literally. Order matters, the first non-empty match wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from skforms.services.field_resolver import build_alias_table

ANONYMOUS_NAME = "Anonymous User"
DEFAULT_RECIPIENT_NAME = "User"


SUBMISSION_ALIASES = build_alias_table(
    {
        "submitter_name": (
            "Enter you full name",
            "Enter You Full Name",
            "Enter Your Full Name",
            "Enter your Full Name",
            "Full Name",
            "Full name",
            "Name",
            "fullName",
            "name",
        ),
        "payer_name": (
            "Full Name",
            "fullName",
            "name",
        ),
        "recipient_email": (
            "Enter your Email Address",
            "Enter Your Email Address",
            "Email Address",
            "email",
            "Email",
            "emailAddress",
            "email_address",
        ),
        "recipient_name": (
            "Enter your Name",
            "Enter Your Name",
            "Name",
            "name",
        ),
    }
)


YOUTH_PROFILE_ALIASES = build_alias_table(
    {
        # Basic information
        "full_name": ("fullName", "name", "Full Name", "Complete Name"),
        "date_of_birth": ("dateOfBirth", "birthDate", "Date of Birth", "dob"),
        "sex": ("sex", "gender", "Sex", "Gender", "Select Gender"),
        "civil_status": ("civilStatus", "Civil Status", "maritalStatus"),
        "mobile_number": (
            "mobileNumber",
            "phone",
            "Mobile Number",
            "Contact Number",
            "Enter mobile number",
        ),
        "email_address": ("emailAddress", "email", "Email Address"),
        "profile_picture": (
            "profilePicture",
            "Profile Picture (2x2)*",
            "Profile Picture (2x2)",
            "Profile Picture",
        ),
        # Address
        "barangay": ("barangay", "Barangay", "Municipality and Barangay "),
        "street_address": (
            "streetAddress",
            "address",
            "Street Address",
            "Complete Address",
            "Street Address/Purok",
        ),
        # Education
        "education_level": (
            "educationLevel",
            "Education Level",
            "Current Education Level",
            "level",
        ),
        "school_name": ("schoolName", "school", "School Name", "Current School"),
        "course_strand": (
            "courseStrand",
            "course",
            "Course/Strand",
            "Course/Strand (if SHS/College)",
            "Program",
        ),
        "grade_level": (
            "gradeLevel",
            "grade",
            "Grade Level",
            "Year Level",
            "Enter your grade/year level",
        ),
        "is_graduated": ("isGraduated", "graduated", "Is Graduated", "Graduated?"),
        "last_school_year": (
            "lastSchoolYear",
            "Last School Year",
            "Last School Year Attended",
        ),
        # Skills and interests
        "skills": ("skills", "Skills", "Special Skills"),
        "hobbies": ("hobbies", "Hobbies", "Interests", "Hobbies/Interests"),
        "preferred_programs": (
            "preferredPrograms",
            "Preferred Programs",
            "Programs of Interest",
            "Preferred SK Programs",
        ),
        # Employment
        "is_employed": ("isEmployed", "employed", "Is Employed", "Employed?"),
        "occupation": (
            "occupation",
            "job",
            "Occupation",
            "Current Job",
            "Occupation (if employed)",
        ),
        "working_hours": ("workingHours", "Working Hours"),
        # SK involvement
        "sk_membership": (
            "skMembership",
            "sk",
            "SK Membership",
            "SK Member",
            "SK Membership or Affiliation",
        ),
        "volunteer_experience": (
            "volunteerExperience",
            "Volunteer Experience",
            "Volunteer Work",
            "Community Service",
        ),
        "leadership_roles": ("leadershipRoles", "Leadership Roles", "Leadership Role Held"),
        # Special cases
        "is_pwd": ("isPWD", "pwd", "Is PWD", "Person with Disability", "PWD Status"),
        "pwd_type": ("pwdType", "PWD Type", "Type of Disability", "PWD Type (if Yes)"),
        "indigenous_group": (
            "indigenousGroup",
            "Indigenous Group",
            "Ethnic Group",
            "Indigenous Group Affiliation",
        ),
        "is_solo_parent": ("isSoloParent", "Is Solo Parent", "Single Parent", "Solo Parent"),
        "special_cases": ("specialCases", "Special Cases"),
        # Emergency contact
        "emergency_contact_person": (
            "emergencyContactPerson",
            "Emergency Contact Person",
            "Emergency Contact",
        ),
        "emergency_contact_number": (
            "emergencyContactNumber",
            "Emergency Contact Number",
            "Emergency Phone",
        ),
        "emergency_relationship": (
            "emergencyRelationship",
            "Emergency Relationship",
            "Relationship",
        ),
        # Location
        "latitude": ("latitude",),
        "longitude": ("longitude",),
        # Committee
        "committee": ("committee", "Committee", "Committee "),
    },
    exclusive=True,
)


def resolve_submitter_name(data: Mapping[str, Any]) -> str:
    return str(SUBMISSION_ALIASES.resolve(data, "submitter_name", ANONYMOUS_NAME))


def resolve_payer_name(data: Mapping[str, Any], user_name: str | None = None) -> str:
    name = SUBMISSION_ALIASES.resolve(data, "payer_name")
    if name is not None:
        return str(name)
    if user_name and user_name.strip():
        return user_name.strip()
    return DEFAULT_RECIPIENT_NAME


def resolve_recipient_email(data: Mapping[str, Any]) -> str | None:
    email = SUBMISSION_ALIASES.resolve(data, "recipient_email")
    return email if isinstance(email, str) else None


def resolve_recipient_name(data: Mapping[str, Any]) -> str:
    return str(SUBMISSION_ALIASES.resolve(data, "recipient_name", DEFAULT_RECIPIENT_NAME))
