# Scoring factors submodule
from scribe_match.domain.scoring.factors.overlap import (
    SubjectMatchFactor,
    LanguageMatchFactor,
    subject_match,
    language_match,
)
from scribe_match.domain.scoring.factors.experience import ExperienceFactor, experience_match
from scribe_match.domain.scoring.factors.rating import RatingFactor, rating_match
from scribe_match.domain.scoring.factors.location import LocationFactor, location_match
from scribe_match.domain.scoring.factors.availability import AvailabilityFactor, availability_match
from scribe_match.domain.scoring.factors.preference import PreferenceFactor, preference_match

__all__ = [
    "SubjectMatchFactor",
    "LanguageMatchFactor",
    "ExperienceFactor",
    "RatingFactor",
    "LocationFactor",
    "AvailabilityFactor",
    "PreferenceFactor",
    "subject_match",
    "language_match",
    "experience_match",
    "rating_match",
    "location_match",
    "availability_match",
    "preference_match",
]
