from .common import can_access, is_admin, is_owner

__all__ = ["can_access", "is_admin", "is_owner"]
