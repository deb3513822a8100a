"""
Service layer helpers that orchestrate domain logic into result payloads.
"""

from .astronomy import AstronomyService, EphemerisProtocol
from .toolkit import TimezoneToolkitService

__all__ = ["AstronomyService", "EphemerisProtocol", "TimezoneToolkitService"]
