from __future__ import annotations

from datetime import date
from itertools import count

import pytest

from flights_db.database import create_session_factory
from flights_db.dataset import add_carrier, add_customer, add_flight
from flights_db.ledger import count_reservations_for_flight, insert_reservation
from flights_db.models import Base, Flight, User

DAY = date(2024, 5, 1)


@pytest.fixture
def session_factory(tmp_path):
    engine, factory = create_session_factory(f"sqlite+pysqlite:///{tmp_path / 'flights.db'}")
    Base.metadata.create_all(engine)
    with factory() as session:
        add_carrier(session, cid="AA", name="American Airlines Inc.")
        add_carrier(session, cid="DL", name="Delta Air Lines Inc.")
        session.commit()
    yield factory
    engine.dispose()


@pytest.fixture
def make_flight(session_factory):
    numbers = count(100)

    def _make(
        origin_city: str = "Seattle WA",
        dest_city: str = "Boston MA",
        *,
        on_date: date = DAY,
        actual_time: float | None = 300.0,
        carrier_id: str = "AA",
    ) -> Flight:
        with session_factory() as session:
            record = add_flight(
                session,
                carrier_id=carrier_id,
                flight_num=str(next(numbers)),
                origin_city=origin_city,
                dest_city=dest_city,
                on_date=on_date,
                actual_time=actual_time,
            )
            flight = Flight.from_record(record)
            session.commit()
        return flight

    return _make


@pytest.fixture
def make_user(session_factory):
    handles = count(1)

    def _make(handle: str | None = None, password: str = "secret") -> User:
        handle = handle or f"user{next(handles)}"
        with session_factory() as session:
            customer = add_customer(session, handle=handle, password=password, name=handle.title())
            user = User.from_customer(customer)
            session.commit()
        return user

    return _make


@pytest.fixture
def fill_flight(session_factory, make_user):
    """Give ``flight`` ``seats`` reservations held by fresh users."""

    def _fill(flight: Flight, seats: int) -> None:
        holders = [make_user() for _ in range(seats)]
        with session_factory() as session:
            for holder in holders:
                insert_reservation(session, holder.id, flight.id)
            session.commit()

    return _fill


@pytest.fixture
def seats_taken(session_factory):
    def _count(flight: Flight) -> int:
        with session_factory() as session:
            return count_reservations_for_flight(session, flight.id)

    return _count
