import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tripai.schemas.itinerary import Itinerary


class TripParams(BaseModel):
    """Trip parameters as collected by the client form."""
    destination: Optional[str] = None
    days: Optional[int] = None
    budget_min: Optional[int] = Field(None, alias="budgetMin")
    budget_max: Optional[int] = Field(None, alias="budgetMax")
    budget_label: Optional[str] = Field(None, alias="budgetLabel")

    class Config:
        populate_by_name = True


class TripCreate(TripParams):
    itinerary: Optional[Itinerary] = None


class GenerateResponse(BaseModel):
    itinerary: dict
    total_cost: float = Field(alias="totalCost")
    activity_count: int = Field(alias="activityCount")

    class Config:
        populate_by_name = True


class TripResponse(BaseModel):
    id: int
    destination: str
    days: int
    budget_min: Optional[int] = Field(None, alias="budgetMin")
    budget_max: Optional[int] = Field(None, alias="budgetMax")
    budget_label: Optional[str] = Field(None, alias="budgetLabel")
    itinerary: Itinerary
    is_active: bool = Field(alias="isActive")
    created_at: datetime = Field(alias="createdAt")
    total_cost: float = Field(alias="totalCost")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, trip) -> "TripResponse":
        itinerary = Itinerary.model_validate(json.loads(trip.itinerary))
        return cls(
            id=trip.id,
            destination=trip.destination,
            days=trip.days,
            budget_min=trip.budget_min,
            budget_max=trip.budget_max,
            budget_label=trip.budget_label,
            itinerary=itinerary,
            is_active=bool(trip.is_active),
            created_at=trip.created_at,
            total_cost=itinerary.total_cost,
        )

    def to_payload(self) -> dict:
        data = self.model_dump(by_alias=True, mode="json")
        data["itinerary"] = self.itinerary.to_payload()
        return data
