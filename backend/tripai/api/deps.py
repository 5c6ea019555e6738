"""FastAPI dependencies shared by the routers."""
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tripai.config import get_settings
from tripai.database import get_db
from tripai.services.ai_service import AIBackend, build_backend
from tripai.services.itinerary_generator import ItineraryGenerator
from tripai.services.sessions import SessionManager, session_manager_from_settings
from tripai.services.trip_service import TripItineraryService

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_session_manager() -> SessionManager:
    return session_manager_from_settings(get_settings())


def get_ai_backend() -> Optional[AIBackend]:
    return build_backend(get_settings())


def get_trip_service(
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
    backend: Optional[AIBackend] = Depends(get_ai_backend),
) -> TripItineraryService:
    return TripItineraryService(db, sessions, ItineraryGenerator(backend))


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    sessions: SessionManager = Depends(get_session_manager),
) -> int:
    token = credentials.credentials if credentials else None
    return sessions.verify(token)
