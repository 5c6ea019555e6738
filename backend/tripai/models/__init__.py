# SQLAlchemy models
from tripai.models.user import User
from tripai.models.trip import Trip

__all__ = [
    "User",
    "Trip",
]
