"""
Pydantic models for student data.

``Student`` is the record returned by the backend, identified by a
server assigned ``id``.  ``StudentInput`` is the body sent for both
create and update requests; updates replace the whole record so the
two share one schema.  The wire format uses ``birthDate`` while the
Python attribute is ``birth_date``.
"""

from datetime import date
from enum import Enum
from typing import Union

from pydantic import BaseModel, Field, field_validator


class Program(str, Enum):
    """Academic programs a student can be enrolled in."""

    COMPUTER_SCIENCE = "Computer Science"
    SOFTWARE_ENGINEERING = "Software Engineering"
    INFORMATION_SYSTEMS = "Information Systems"
    DATA_SCIENCE = "Data Science"
    CYBERSECURITY = "Cybersecurity"
    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    GAME_DEVELOPMENT = "Game Development"
    ARTIFICIAL_INTELLIGENCE = "Artificial Intelligence"
    MACHINE_LEARNING = "Machine Learning"


def _date_part(value):
    # Some backends serialise dates as full ISO datetimes.
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


class StudentInput(BaseModel):
    """Schema for creating or replacing a student."""

    name: str = Field(..., min_length=2, examples=["Ada Lovelace"])
    email: str = Field(..., examples=["ada@example.com"])
    birth_date: date = Field(..., alias="birthDate", examples=["2001-12-10"])
    program: Program = Field(..., examples=["Computer Science"])

    model_config = {
        "populate_by_name": True,
    }

    def to_payload(self) -> dict:
        """Return the JSON body expected by ``POST``/``PUT /students``."""
        return self.model_dump(by_alias=True, mode="json")


class Student(BaseModel):
    """Schema for a student read from the API.

    ``program`` is kept as plain text: the backend is the authority on
    stored records and may hold programs the client does not offer.
    """

    id: Union[int, str]
    name: str
    email: str
    birth_date: date = Field(..., alias="birthDate")
    program: str

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("birth_date", mode="before")
    @classmethod
    def strip_time(cls, v):
        return _date_part(v)
