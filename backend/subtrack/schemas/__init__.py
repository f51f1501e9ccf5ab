"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import SignInSchema, SignUpSchema
from .subscription import SubscriptionCreateSchema, SubscriptionSchema, SubscriptionUpdateSchema
from .user import UserSchema, UserUpdateSchema

__all__ = [
    "SignInSchema",
    "SignUpSchema",
    "SubscriptionCreateSchema",
    "SubscriptionSchema",
    "SubscriptionUpdateSchema",
    "UserSchema",
    "UserUpdateSchema",
]
