from subtrack.models.subscription import Subscription
from subtrack.models.user import User

__all__ = ["Subscription", "User"]
