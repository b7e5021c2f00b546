"""
Repository Layer Package.

Data-access abstractions over the Supabase profile store.  Services never
query ``client.table`` directly.

Usage:
    from accessgate.repositories.profile_repository import ProfileRepository
"""

from accessgate.repositories.base_repository import BaseRepository
from accessgate.repositories.profile_repository import (
    ProfileNotFoundError,
    ProfileRepository,
)

__all__ = [
    "BaseRepository",
    "ProfileNotFoundError",
    "ProfileRepository",
]
