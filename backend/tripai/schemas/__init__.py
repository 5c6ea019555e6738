from tripai.schemas.itinerary import Activity, DayPlan, Itinerary
from tripai.schemas.trip import TripParams, TripCreate, TripResponse, GenerateResponse
from tripai.schemas.auth import RegisterRequest, LoginRequest, UserResponse, AuthResponse

__all__ = [
    "Activity", "DayPlan", "Itinerary",
    "TripParams", "TripCreate", "TripResponse", "GenerateResponse",
    "RegisterRequest", "LoginRequest", "UserResponse", "AuthResponse",
]
