"""
Persisted trips, always scoped to their owner.

Every lookup filters on both trip id and owner id, so a trip that belongs to
someone else is indistinguishable from one that does not exist.
"""
import json
import logging
from typing import Optional

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from tripai.errors import NotFound, ValidationError
from tripai.models.trip import Trip
from tripai.models.user import User
from tripai.schemas.itinerary import Itinerary
from tripai.services.itinerary_generator import MAX_DB_INTEGER, check_budget, check_trip_params

logger = logging.getLogger(__name__)


class TripRepository:
    def __init__(self, db: Session):
        self.db = db

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
        if itinerary is None:
            raise ValidationError("Destination, days and itinerary are required.")
        destination, days = check_trip_params(destination, days)
        check_budget(budget_min, budget_max)

        trip = Trip(
            user_id=owner_id,
            destination=destination,
            days=days,
            budget_min=budget_min,
            budget_max=budget_max,
            budget_label=budget_label or None,
            itinerary=json.dumps(itinerary.to_payload(), ensure_ascii=False),
            is_active=False,
        )
        self.db.add(trip)
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Save trip failed for user {owner_id}: {e}")
            raise
        self.db.refresh(trip)

        logger.info(f"Saved trip {trip.id} for user {owner_id} ({destination}, {days} days)")
        return trip

    def list(self, owner_id: int) -> list[Trip]:
        return (
            self.db.query(Trip)
            .filter(Trip.user_id == owner_id)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
            .all()
        )

    def get(self, owner_id: int, trip_id: int) -> Trip:
        if not 1 <= trip_id <= MAX_DB_INTEGER:
            logger.info(f"Trip id out of range for user {owner_id}")
            raise NotFound()
        trip = (
            self.db.query(Trip)
            .filter(Trip.id == trip_id, Trip.user_id == owner_id)
            .first()
        )
        if trip is None:
            logger.info(f"Trip {trip_id} not found for user {owner_id}")
            raise NotFound()
        return trip

    def delete(self, owner_id: int, trip_id: int) -> None:
        trip = self.get(owner_id, trip_id)
        self.db.delete(trip)
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Delete trip {trip_id} failed for user {owner_id}: {e}")
            raise
        logger.info(f"Deleted trip {trip_id} for user {owner_id}")

    def activate(self, owner_id: int, trip_id: int) -> Trip:
        """Make ``trip_id`` the owner's only active trip.

        The owner row is locked first (a no-op on SQLite, which serializes
        writers itself) and the flag is rewritten for all of the owner's trips
        in one UPDATE, so readers see either the old or the new active trip.
        """
        try:
            self.db.query(User.id).filter(User.id == owner_id).with_for_update().first()
            trip = self.get(owner_id, trip_id)

            self.db.execute(
                update(Trip)
                .where(Trip.user_id == owner_id)
                .values(is_active=case((Trip.id == trip_id, True), else_=False))
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            if not isinstance(e, NotFound):
                logger.error(f"Activate trip {trip_id} failed for user {owner_id}: {e}")
            raise

        self.db.refresh(trip)
        logger.info(f"Activated trip {trip_id} for user {owner_id}")
        return trip

    def get_active(self, owner_id: int) -> Optional[Trip]:
        return (
            self.db.query(Trip)
            .filter(Trip.user_id == owner_id, Trip.is_active == True)  # noqa: E712
            .first()
        )
