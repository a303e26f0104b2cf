"""User profile records and the payloads that change them."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Sex = Literal["male", "female", "other"]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]
UnitSystem = Literal["metric", "standard"]

UNIT_METRIC: UnitSystem = "metric"
UNIT_STANDARD: UnitSystem = "standard"

# Values given to a freshly signed-up account until the user edits them.
DEFAULT_AGE = 30
DEFAULT_WEIGHT = 70.0
DEFAULT_HEIGHT = 170.0
DEFAULT_SEX: Sex = "other"
DEFAULT_EXPERIENCE: ExperienceLevel = "beginner"
DEFAULT_UNIT_SYSTEM: UnitSystem = UNIT_METRIC

MIN_AGE = 13
MAX_AGE = 120

_CLEARABLE_FIELDS = frozenset({"image_url", "medical_conditions"})


class UserProfile(BaseModel):
    """A user account as seen by services and the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    age: int
    weight: float
    height: float
    sex: Sex
    fitness_goals: list[str] = Field(default_factory=list)
    experience_level: ExperienceLevel
    unit_system: UnitSystem
    is_admin: bool = False
    image_url: str | None = None
    medical_conditions: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile.

    Unknown keys (``email``, ``is_admin``) are ignored.
    """

    name: str | None = Field(default=None, min_length=1)
    age: int | None = Field(default=None, ge=MIN_AGE, le=MAX_AGE)
    weight: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    sex: Sex | None = None
    fitness_goals: list[str] | None = None
    experience_level: ExperienceLevel | None = None
    unit_system: UnitSystem | None = None
    image_url: str | None = None
    medical_conditions: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields to write. An explicit ``None`` only clears optional fields."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in _CLEARABLE_FIELDS
        }


class AdminUserUpdate(ProfileUpdate):
    """Profile changes an admin may apply, including the admin flag."""

    is_admin: bool | None = None
