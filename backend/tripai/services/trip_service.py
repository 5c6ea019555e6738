"""
Request lifecycle for trips: authenticate, generate, then persist.

Generation and persistence are separate entry points. ``generate`` never
opens a write on the store, and the persistence methods never call the
provider.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from tripai.models.trip import Trip
from tripai.models.user import User
from tripai.schemas.itinerary import Itinerary
from tripai.services.accounts import AccountStore
from tripai.services.itinerary_generator import ItineraryGenerator
from tripai.services.sessions import SessionManager
from tripai.services.trip_repository import TripRepository

logger = logging.getLogger(__name__)


class TripItineraryService:
    def __init__(self, db: Session, sessions: SessionManager, generator: ItineraryGenerator):
        self.sessions = sessions
        self.generator = generator
        self.accounts = AccountStore(db)
        self.trips = TripRepository(db)

    # Accounts

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> tuple[str, User]:
        user = self.accounts.register(name, email, password)
        return self.sessions.issue(user.id), user

    def login(self, email: Optional[str], password: Optional[str]) -> tuple[str, User]:
        user = self.accounts.authenticate(email, password)
        logger.info(f"User {user.id} logged in")
        return self.sessions.issue(user.id), user

    def authenticate(self, credential: Optional[str]) -> int:
        return self.sessions.verify(credential)

    def current_user(self, owner_id: int) -> User:
        return self.accounts.get(owner_id)

    # Generation

    async def generate(
        self,
        owner_id: int,
        destination: Optional[str],
        days,
        budget_min: Optional[int] = None,
        budget_max: Optional[int] = None,
        budget_label: Optional[str] = None,
    ) -> Itinerary:
        logger.info(f"User {owner_id} requested a {days}-day itinerary for '{destination}'")
        try:
            return await self.generator.generate(
                destination, days, budget_min, budget_max, budget_label
            )
        except Exception as e:
            logger.warning(f"Generation failed for user {owner_id}: {type(e).__name__}: {e}")
            raise

    # Persistence

    def save(
        self,
        owner_id: int,
        destination: Optional[str],
        days,
        budget_min: Optional[int] = None,
        budget_max: Optional[int] = None,
        budget_label: Optional[str] = None,
        itinerary: Optional[Itinerary] = None,
    ) -> Trip:
        return self.trips.save(
            owner_id, destination, days, budget_min, budget_max, budget_label, itinerary
        )

    def list(self, owner_id: int) -> list[Trip]:
        return self.trips.list(owner_id)

    def get(self, owner_id: int, trip_id: int) -> Trip:
        return self.trips.get(owner_id, trip_id)

    def delete(self, owner_id: int, trip_id: int) -> None:
        self.trips.delete(owner_id, trip_id)

    def activate(self, owner_id: int, trip_id: int) -> Trip:
        return self.trips.activate(owner_id, trip_id)

    def get_active(self, owner_id: int) -> Optional[Trip]:
        return self.trips.get_active(owner_id)
