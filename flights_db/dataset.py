"""Utilities to populate the database with sample data for tests and demos."""
from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Dict, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .booking import BookingCoordinator, BookingOutcome
from .models import Carrier, Customer, Flight, FlightRecord, User

CITIES: Sequence[str] = (
    "Seattle WA",
    "Boston MA",
    "Chicago IL",
    "Denver CO",
    "Atlanta GA",
    "Dallas TX",
    "New York NY",
    "San Francisco CA",
)
CARRIERS = (("AA", "American Airlines Inc."), ("DL", "Delta Air Lines Inc."), ("UA", "United Air Lines Inc."))
FIRST_NAMES = ("Ava", "Noah", "Liam", "Mia", "Lucas", "Emma", "Ethan", "Isabella")
LAST_NAMES = ("Johnson", "Williams", "Smith", "Brown", "Garcia", "Lee")


def add_carrier(session: Session, *, cid: str, name: str) -> Carrier:
    carrier = Carrier(cid=cid, name=name)
    session.add(carrier)
    session.flush()
    return carrier


def add_flight(
    session: Session,
    *,
    carrier_id: str,
    flight_num: str,
    origin_city: str,
    dest_city: str,
    on_date: date,
    actual_time: Optional[float],
) -> FlightRecord:
    """Create a flight entry."""

    flight = FlightRecord(
        carrier_id=carrier_id,
        flight_num=flight_num,
        origin_city=origin_city,
        dest_city=dest_city,
        year=on_date.year,
        month_id=on_date.month,
        day_of_month=on_date.day,
        actual_time=actual_time,
    )
    session.add(flight)
    session.flush()
    return flight


def add_customer(session: Session, *, handle: str, password: str, name: str) -> Customer:
    customer = Customer(handle=handle, password=password, name=name)
    session.add(customer)
    session.flush()
    return customer


def generate_sample_data(
    session_factory: sessionmaker[Session],
    *,
    start: date = date(2024, 5, 1),
    days: int = 3,
    flights: int = 60,
    customers: int = 20,
    bookings: int = 40,
) -> Dict[str, int]:
    """Populate the database with deterministic pseudo-random data.

    Bookings go through :class:`BookingCoordinator`, so the summary counts
    only the attempts that were admitted.
    """

    random.seed(42)
    with session_factory() as session:
        for cid, name in CARRIERS:
            add_carrier(session, cid=cid, name=name)
        for index in range(flights):
            origin, destination = random.sample(CITIES, 2)
            add_flight(
                session,
                carrier_id=random.choice(CARRIERS)[0],
                flight_num=str(100 + index),
                origin_city=origin,
                dest_city=destination,
                on_date=start + timedelta(days=random.randrange(days)),
                actual_time=float(random.randint(45, 360)),
            )
        for index in range(customers):
            add_customer(
                session,
                handle=f"user{index}",
                password=f"pass{index}",
                name=f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
            )
        session.commit()

    with session_factory() as session:
        catalog = [Flight.from_record(record) for record in session.scalars(select(FlightRecord))]
        users = [User.from_customer(customer) for customer in session.scalars(select(Customer))]
    if not catalog or not users:
        return {"flights": 0, "customers": 0, "bookings": 0}

    coordinator = BookingCoordinator(session_factory)
    successful = 0
    for _ in range(bookings):
        flight = random.choice(catalog)
        outcome = coordinator.book(random.choice(users), flight.date, [flight])
        if outcome is BookingOutcome.ADDED:
            successful += 1
    return {"flights": flights, "customers": customers, "bookings": successful}
