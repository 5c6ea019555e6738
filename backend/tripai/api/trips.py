from fastapi import APIRouter, Depends

from tripai.api.deps import get_current_user_id, get_trip_service
from tripai.schemas.trip import GenerateResponse, TripCreate, TripParams, TripResponse
from tripai.services.trip_service import TripItineraryService

router = APIRouter()


@router.post("/generate")
async def generate_itinerary(
    params: TripParams,
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    """Generate an itinerary without saving it."""
    itinerary = await service.generate(
        user_id,
        params.destination,
        params.days,
        params.budget_min,
        params.budget_max,
        params.budget_label,
    )
    response = GenerateResponse(
        itinerary=itinerary.to_payload(),
        total_cost=itinerary.total_cost,
        activity_count=itinerary.activity_count,
    )
    return response.model_dump(by_alias=True)


@router.post("", status_code=201)
async def save_trip(
    data: TripCreate,
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    trip = service.save(
        user_id,
        data.destination,
        data.days,
        data.budget_min,
        data.budget_max,
        data.budget_label,
        data.itinerary,
    )
    return {"trip": TripResponse.from_model(trip).to_payload()}


@router.get("")
async def list_trips(
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    trips = service.list(user_id)
    return {"trips": [TripResponse.from_model(t).to_payload() for t in trips]}


@router.get("/active")
async def get_active_trip(
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    """The caller's active trip, or null when none is active."""
    trip = service.get_active(user_id)
    return {"trip": TripResponse.from_model(trip).to_payload() if trip else None}


@router.get("/{trip_id}")
async def get_trip(
    trip_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    trip = service.get(user_id, trip_id)
    return {"trip": TripResponse.from_model(trip).to_payload()}


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    service.delete(user_id, trip_id)
    return {"message": "Trip deleted."}


@router.patch("/{trip_id}/active")
async def activate_trip(
    trip_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TripItineraryService = Depends(get_trip_service),
):
    trip = service.activate(user_id, trip_id)
    return {"trip": TripResponse.from_model(trip).to_payload()}
