"""Single entry point wiring login, search and booking over one store."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .auth import Authenticator
from .booking import BookingCoordinator, BookingOutcome
from .catalog import FlightCatalog
from .config import Settings, load_settings
from .database import create_session_factory
from .models import Base, Flight, Itinerary, User

logger = logging.getLogger(__name__)


class FlightService:
    """Lets clients log in, search for flights, and reserve or cancel seats."""

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session]):
        self.engine = engine
        self.session_factory = session_factory
        self.authenticator = Authenticator(session_factory)
        self.catalog = FlightCatalog(session_factory)
        self.coordinator = BookingCoordinator(session_factory)

    @classmethod
    def open(cls, settings: Optional[Settings] = None) -> "FlightService":
        settings = settings or load_settings()
        engine, session_factory = create_session_factory(settings.engine_url(), echo=settings.echo)
        if settings.create_schema:
            Base.metadata.create_all(engine)
        logger.info("Opened flight store %s", engine.url.render_as_string(hide_password=True))
        return cls(engine, session_factory)

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "FlightService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def log_in(self, handle: str, password: str) -> Optional[User]:
        return self.authenticator.log_in(handle, password)

    def get_flights(self, on_date: date, origin_city: str, dest_city: str) -> List[Itinerary]:
        return self.catalog.find_itineraries(on_date, origin_city, dest_city)

    def get_reservations(self, user: User) -> List[Flight]:
        return self.coordinator.reservations(user)

    def add_reservations(
        self, user: User, on_date: date, flights: Sequence[Flight] | Itinerary
    ) -> BookingOutcome:
        return self.coordinator.book(user, on_date, flights)

    def remove_reservations(self, user: User, flights: Sequence[Flight] | Itinerary) -> None:
        self.coordinator.cancel(user, flights)
