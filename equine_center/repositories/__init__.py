"""Data access repositories."""

from equine_center.repositories.base import BaseRepository
from equine_center.repositories.horse_repository import HorseRepository
from equine_center.repositories.location_repository import (
    AssignmentRepository,
    LocationRepository,
)
from equine_center.repositories.owner_repository import OwnerRepository
from equine_center.repositories.race_repository import ParticipantRepository, RaceRepository
from equine_center.repositories.store import ENTITY_MODELS, INDEXES, RecordStore
from equine_center.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "HorseRepository",
    "OwnerRepository",
    "LocationRepository",
    "AssignmentRepository",
    "RaceRepository",
    "ParticipantRepository",
    "UserRepository",
    "RecordStore",
    "ENTITY_MODELS",
    "INDEXES",
]
