"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from subtrack.repositories.base import BaseRepository, apply_sorting
from subtrack.repositories.subscription import SubscriptionRepository
from subtrack.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "apply_sorting",
    "SubscriptionRepository",
    "UserRepository",
]
