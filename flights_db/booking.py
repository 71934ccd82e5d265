"""Reservation commit protocol: serializable add, all-or-nothing cancel."""
from __future__ import annotations

import enum
import logging
from datetime import date
from typing import List, Sequence

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .database import serializable_scope, session_scope
from .errors import DataAccessFault
from .ledger import (
    count_reservations_for_flight,
    count_reservations_for_user_on_date,
    delete_reservation,
    insert_reservation,
    list_reservations_for_user,
)
from .models import Flight, Itinerary, User, as_flights, as_itinerary

logger = logging.getLogger(__name__)

MAX_FLIGHT_BOOKINGS = 3

_SERIALIZATION_FAILURE = "40001"


class BookingOutcome(enum.Enum):
    ADDED = "added"
    FLIGHT_FULL = "flight_full"
    DAY_FULL = "day_full"


def _is_serialization_failure(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return code == _SERIALIZATION_FAILURE


class BookingCoordinator:
    """Adds and cancels reservations under the capacity and daily limits.

    A user holds at most one itinerary per calendar date and a flight holds at
    most ``max_flight_bookings`` reservations. Both limits are checked and the
    rows inserted in one SERIALIZABLE transaction, so concurrent bookings from
    other sessions cannot both pass a count that only one of them may use.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        max_flight_bookings: int = MAX_FLIGHT_BOOKINGS,
        serialization_retries: int = 3,
    ):
        self.session_factory = session_factory
        self.max_flight_bookings = max_flight_bookings
        self.serialization_retries = serialization_retries

    def book(self, user: User, on_date: date, flights: Sequence[Flight] | Itinerary) -> BookingOutcome:
        """Reserve every flight of one itinerary for ``user``, or none of them.

        ``flights`` must form a valid itinerary flown on ``on_date``; anything
        else raises ``ValueError`` before the store is touched.
        """

        if not flights:
            raise ValueError("at least one flight is required to book")
        flights = as_itinerary(flights).flights
        if any(flight.date != on_date for flight in flights):
            raise ValueError(f"every flight must depart on {on_date.isoformat()}")

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._attempt_booking(user, on_date, flights)
            except SQLAlchemyError as exc:
                if _is_serialization_failure(exc) and attempt <= self.serialization_retries:
                    logger.warning(
                        "Serialization conflict booking for user %s (attempt %d), retrying",
                        user.id,
                        attempt,
                    )
                    continue
                raise DataAccessFault(f"booking failed for user {user.id}: {exc}") from exc

    def _attempt_booking(self, user: User, on_date: date, flights: Sequence[Flight]) -> BookingOutcome:
        with serializable_scope(self.session_factory) as session:
            if count_reservations_for_user_on_date(session, user.id, on_date) > 0:
                session.rollback()
                logger.debug("User %s already holds a reservation on %s", user.id, on_date)
                return BookingOutcome.DAY_FULL

            for flight in flights:
                if count_reservations_for_flight(session, flight.id) >= self.max_flight_bookings:
                    session.rollback()
                    logger.debug("Flight %s is full, booking for user %s rolled back", flight.id, user.id)
                    return BookingOutcome.FLIGHT_FULL
                insert_reservation(session, user.id, flight.id)

        logger.info(
            "Booked flights %s for user %s on %s",
            ", ".join(str(flight.id) for flight in flights),
            user.id,
            on_date.isoformat(),
        )
        return BookingOutcome.ADDED

    def cancel(self, user: User, flights: Sequence[Flight] | Itinerary) -> None:
        """Remove the user's reservations on ``flights`` in one transaction.

        Store failures roll the whole cancellation back and are logged, not
        raised: callers are not told when a cancellation did not happen.
        """

        flights = as_flights(flights)
        try:
            with session_scope(self.session_factory) as session:
                removed = sum(delete_reservation(session, user.id, flight.id) for flight in flights)
        except SQLAlchemyError:
            logger.exception("Cancelling reservations for user %s failed, rolled back", user.id)
            return
        logger.info("Cancelled %d reservation(s) for user %s", removed, user.id)

    def reservations(self, user: User) -> List[Flight]:
        try:
            with self.session_factory() as session:
                return list_reservations_for_user(session, user.id)
        except SQLAlchemyError as exc:
            raise DataAccessFault(f"listing reservations failed for user {user.id}: {exc}") from exc
