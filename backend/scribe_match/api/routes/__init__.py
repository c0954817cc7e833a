# API Routes Module
from scribe_match.api.routes import matching

__all__ = [
    "matching",
]
