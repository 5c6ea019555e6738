"""
Canonical itinerary shape.

Field names on the wire are the camelCase names the provider is asked to
emit (``estimatedCost``, ``dayTotal``, ``totalActivities``); Python code
uses the snake_case attributes.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

# Activity slots a DayPlan can fill, in display order
DAY_PERIODS = ("morning", "afternoon", "evening")


class Activity(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    # null means free
    estimated_cost: Optional[float] = Field(None, alias="estimatedCost", ge=0)

    class Config:
        populate_by_name = True


class DayPlan(BaseModel):
    day: int = Field(gt=0)
    title: Optional[str] = None
    subtitle: Optional[str] = None
    morning: Optional[Activity] = None
    afternoon: Optional[Activity] = None
    evening: Optional[Activity] = None
    day_total: Optional[float] = Field(None, alias="dayTotal", ge=0)

    class Config:
        populate_by_name = True

    @property
    def activities(self) -> list[Activity]:
        return [a for a in (getattr(self, p) for p in DAY_PERIODS) if a is not None]

    @property
    def activity_cost(self) -> float:
        return sum(a.estimated_cost or 0 for a in self.activities)

    @model_validator(mode="after")
    def fill_day_total(self):
        # The provider's own dayTotal wins; only a missing one is derived.
        if self.day_total is None:
            self.day_total = self.activity_cost
        elif abs(self.day_total - self.activity_cost) > 0.01:
            logger.warning(
                f"Day {self.day}: dayTotal {self.day_total} differs from "
                f"activity sum {self.activity_cost}"
            )
        return self


class Itinerary(BaseModel):
    destination: str = Field(min_length=1)
    country: Optional[str] = None
    region: Optional[str] = None
    summary: Optional[str] = None
    month: Optional[str] = None
    total_activities: Optional[int] = Field(None, alias="totalActivities", ge=0)
    days: list[DayPlan] = Field(min_length=1)

    class Config:
        populate_by_name = True

    @field_validator("days")
    @classmethod
    def unique_day_numbers(cls, days: list[DayPlan]) -> list[DayPlan]:
        seen = set()
        for plan in days:
            if plan.day in seen:
                raise ValueError(f"day {plan.day} appears more than once")
            seen.add(plan.day)
        return days

    @property
    def total_cost(self) -> float:
        """Sum of every day's dayTotal. Never read from the provider."""
        return sum(d.day_total or 0 for d in self.days)

    @property
    def activity_count(self) -> int:
        if self.total_activities is not None:
            return self.total_activities
        return 3 * len(self.days)

    def get_day(self, day: int) -> Optional[DayPlan]:
        """Look up a DayPlan by its ``day`` number, not its position."""
        for plan in self.days:
            if plan.day == day:
                return plan
        return None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
