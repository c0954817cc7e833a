"""
Domain Models for Scribe Match

Pure Python/Pydantic models with no framework dependencies.
These models define the matching inputs (profiles, exam request, filters)
and the MatchResult value object produced by every match run.
"""

import math
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, List, Optional, Tuple
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


WEEKDAY_NAMES = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)

# Upper bound for the distance filter slider; larger values are clamped.
MAX_FILTER_DISTANCE_KM = 1000.0
MAX_RATING = 5.0


def normalize_terms(values: Any) -> List[str]:
    """Trim, lower-case and de-duplicate subject/language lists, keeping order."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]

    seen: List[str] = []
    for value in values:
        term = str(value).strip().lower()
        if term and term not in seen:
            seen.append(term)
    return seen


class Gender(str, Enum):
    """Scribe gender as declared at registration."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class GenderPreference(str, Enum):
    """Student's preferred scribe gender."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    ANY = "any"


class AvailabilityMode(str, Enum):
    """Availability filter modes offered to the student."""
    ANY = "any"
    AVAILABLE_NOW = "available_now"
    TODAY = "today"
    THIS_WEEK = "this_week"


class ExperienceLevel(str, Enum):
    """Experience tier filter. Bands overlap on purpose (see result_filter)."""
    ANY = "any"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class Location(BaseModel):
    """Geographic point with an optional postal address."""
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None


class TimeSlot(BaseModel):
    """Recurring weekly slot. day_of_week follows date.weekday(): 0 = Monday."""
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def validate_order(self) -> "TimeSlot":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ScribeAvailability(BaseModel):
    """Scribe's declared availability and travel limits."""
    days_available: List[str] = Field(default_factory=list)
    time_slots: List[TimeSlot] = Field(default_factory=list)
    max_distance_willing_km: float = Field(25.0, ge=0.0)
    blackout_dates: List[date] = Field(default_factory=list)
    exam_types_willing: List[str] = Field(default_factory=list)
    remote_capable: bool = False

    @field_validator("days_available", mode="before")
    @classmethod
    def validate_days(cls, v: Any) -> List[str]:
        days = normalize_terms(v)
        unknown = [d for d in days if d not in WEEKDAY_NAMES]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        return days

    @field_validator("exam_types_willing", mode="before")
    @classmethod
    def validate_exam_types(cls, v: Any) -> List[str]:
        return normalize_terms(v)


class StudentProfile(BaseModel):
    """Validated student profile, owned by the registration subsystem."""
    id: str
    name: str = ""
    location: Location
    preferred_subjects: List[str] = Field(default_factory=list)
    language_preferences: List[str] = Field(default_factory=list)
    max_travel_distance_km: float = Field(25.0, gt=0.0)
    scribe_gender_preference: GenderPreference = GenderPreference.ANY
    scribe_age_range: Optional[Tuple[int, int]] = None

    @field_validator("preferred_subjects", "language_preferences", mode="before")
    @classmethod
    def validate_terms(cls, v: Any) -> List[str]:
        return normalize_terms(v)

    @field_validator("scribe_age_range")
    @classmethod
    def validate_age_range(cls, v: Optional[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        if v is not None and v[0] > v[1]:
            raise ValueError("scribe_age_range minimum exceeds maximum")
        return v


class ScribeProfile(BaseModel):
    """Validated scribe profile. The engine only reads it."""
    id: str
    name: str
    gender: Gender = Gender.OTHER
    date_of_birth: Optional[date] = None
    location: Location
    subjects: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    years_of_experience: float = Field(0.0, ge=0.0)
    total_exams_scribed: int = Field(0, ge=0)
    ratings: List[float] = Field(default_factory=list)
    availability: ScribeAvailability = Field(default_factory=ScribeAvailability)
    is_verified: bool = False

    @field_validator("subjects", "languages", mode="before")
    @classmethod
    def validate_terms(cls, v: Any) -> List[str]:
        return normalize_terms(v)

    @field_validator("ratings")
    @classmethod
    def validate_ratings(cls, v: List[float]) -> List[float]:
        for rating in v:
            if rating < 0 or rating > MAX_RATING:
                raise ValueError(f"Ratings must be between 0 and {MAX_RATING}")
        return v

    @property
    def average_rating(self) -> Optional[float]:
        """Mean rating, or None for a scribe with no history."""
        if not self.ratings:
            return None
        return sum(self.ratings) / len(self.ratings)

    def age_on(self, on: date) -> Optional[int]:
        """Age in whole years on the given date."""
        if self.date_of_birth is None:
            return None
        dob = self.date_of_birth
        age = on.year - dob.year
        if (on.month, on.day) < (dob.month, dob.day):
            age -= 1
        return age


class ExamRequest(BaseModel):
    """Transient exam details for one matching session."""
    subject: str
    exam_date: date
    start_time: time
    duration_minutes: int = Field(180, gt=0, le=24 * 60)
    exam_type: str = "written"
    venue: Optional[str] = None
    special_requirements: str = ""

    @field_validator("subject", "exam_type")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace only")
        return v.strip().lower()

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.exam_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=self.duration_minutes)


_FILTER_MODE_ENUMS = {
    "availability": AvailabilityMode,
    "experience_level": ExperienceLevel,
    "gender_preference": GenderPreference,
}


class FilterCriteria(BaseModel):
    """
    User-adjustable result filters.

    Filters are advisory UI state, so out-of-range values are clamped
    and unknown modes fall back to "any" instead of being rejected.
    """
    max_distance_km: float = 25.0
    min_rating: float = 0.0
    subjects: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    availability: AvailabilityMode = AvailabilityMode.ANY
    experience_level: ExperienceLevel = ExperienceLevel.ANY
    gender_preference: GenderPreference = GenderPreference.ANY
    remote_capable: bool = False
    search_text: str = ""

    @field_validator("max_distance_km", mode="before")
    @classmethod
    def clamp_distance(cls, v: Any) -> float:
        if v is None or not math.isfinite(float(v)):
            return 25.0
        return min(max(float(v), 0.0), MAX_FILTER_DISTANCE_KM)

    @field_validator("min_rating", mode="before")
    @classmethod
    def clamp_rating(cls, v: Any) -> float:
        if v is None or not math.isfinite(float(v)):
            return 0.0
        return min(max(float(v), 0.0), MAX_RATING)

    @field_validator("subjects", "languages", mode="before")
    @classmethod
    def validate_terms(cls, v: Any) -> List[str]:
        return normalize_terms(v)

    @field_validator("availability", "experience_level", "gender_preference", mode="before")
    @classmethod
    def fallback_to_any(cls, v: Any, info: ValidationInfo) -> Any:
        enum_type = _FILTER_MODE_ENUMS[info.field_name]
        if isinstance(v, enum_type):
            return v
        value = str(getattr(v, "value", v) or "any").strip().lower()
        allowed = {m.value for m in enum_type}
        return value if value in allowed else "any"

    @field_validator("search_text", mode="before")
    @classmethod
    def strip_search(cls, v: Any) -> str:
        return str(v or "").strip()

    @classmethod
    def for_student(cls, student: StudentProfile) -> "FilterCriteria":
        """Initial filter state seeded from the student's stated preferences."""
        return cls(
            max_distance_km=student.max_travel_distance_km,
            gender_preference=student.scribe_gender_preference,
        )


class MatchFactors(BaseModel):
    """Per-axis compatibility breakdown, each 0-100."""
    model_config = ConfigDict(frozen=True)

    subject_match: float = Field(0.0, ge=0.0, le=100.0)
    language_match: float = Field(0.0, ge=0.0, le=100.0)
    experience_match: float = Field(0.0, ge=0.0, le=100.0)
    availability_match: float = Field(0.0, ge=0.0, le=100.0)
    location_match: float = Field(0.0, ge=0.0, le=100.0)
    rating_match: float = Field(0.0, ge=0.0, le=100.0)
    preference_match: Optional[float] = Field(None, ge=0.0, le=100.0)


class MatchResult(BaseModel):
    """
    One scored candidate for the current exam request.

    Value object: recomputed on every match run, never mutated.
    """
    model_config = ConfigDict(frozen=True)

    scribe: ScribeProfile
    exam_date: date
    score: float = Field(..., ge=0.0, le=100.0)
    distance_km: float = Field(..., ge=0.0)
    factors: MatchFactors
    estimated_travel_time_minutes: int = Field(..., ge=0)
    is_available: bool
    next_available_date: Optional[date] = None

    @property
    def scribe_id(self) -> str:
        return self.scribe.id

    @property
    def available_on(self) -> Optional[date]:
        """Earliest known date the scribe can take this exam."""
        if self.is_available:
            return self.exam_date
        return self.next_available_date
