"""SQLAlchemy ORM models."""

from skforms.db.models.finance import Revenue
from skforms.db.models.forms import Form, FormSubmission
from skforms.db.models.programs import Event, Program, User
from skforms.db.models.youth import YouthProfile

__all__ = [
    "Event",
    "Form",
    "FormSubmission",
    "Program",
    "Revenue",
    "User",
    "YouthProfile",
]
