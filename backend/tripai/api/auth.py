from fastapi import APIRouter, Depends

from tripai.api.deps import get_current_user_id, get_trip_service
from tripai.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from tripai.services.trip_service import TripItineraryService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    service: TripItineraryService = Depends(get_trip_service),
):
    token, user = service.register(data.name, data.email, data.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    service: TripItineraryService = Depends(get_trip_service),
):
    token, user = service.login(data.email, data.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me")
async def me(
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    user = service.current_user(user_id)
    return {"user": UserResponse.model_validate(user)}
