"""Reservation rows and the count queries used for capacity checks.

Every function takes the caller's session so it runs inside the caller's
transaction; nothing here commits.
"""
from __future__ import annotations

from datetime import date
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .models import Carrier, Flight, FlightRecord, Reservation


def count_reservations_for_flight(session: Session, flight_id: int) -> int:
    stmt = select(func.count()).select_from(Reservation).where(Reservation.fid == flight_id)
    return session.scalar(stmt) or 0


def count_reservations_for_user_on_date(session: Session, user_id: int, on_date: date) -> int:
    stmt = (
        select(func.count(Reservation.uid))
        .select_from(Reservation)
        .join(FlightRecord, FlightRecord.fid == Reservation.fid)
        .where(
            Reservation.uid == user_id,
            FlightRecord.year == on_date.year,
            FlightRecord.month_id == on_date.month,
            FlightRecord.day_of_month == on_date.day,
        )
    )
    return session.scalar(stmt) or 0


def insert_reservation(session: Session, user_id: int, flight_id: int) -> Reservation:
    reservation = Reservation(uid=user_id, fid=flight_id)
    session.add(reservation)
    session.flush()
    return reservation


def delete_reservation(session: Session, user_id: int, flight_id: int) -> int:
    """Delete every (user, flight) row and return how many went away."""

    result = session.execute(
        delete(Reservation).where(Reservation.uid == user_id, Reservation.fid == flight_id)
    )
    return result.rowcount or 0


def list_reservations_for_user(session: Session, user_id: int) -> List[Flight]:
    stmt = (
        select(
            FlightRecord.fid,
            Carrier.name,
            FlightRecord.flight_num,
            FlightRecord.origin_city,
            FlightRecord.dest_city,
            FlightRecord.actual_time,
            FlightRecord.year,
            FlightRecord.month_id,
            FlightRecord.day_of_month,
        )
        .select_from(Reservation)
        .join(FlightRecord, FlightRecord.fid == Reservation.fid)
        .join(Carrier, Carrier.cid == FlightRecord.carrier_id)
        .where(Reservation.uid == user_id)
        .order_by(
            FlightRecord.year,
            FlightRecord.month_id,
            FlightRecord.day_of_month,
            FlightRecord.fid,
        )
    )
    flights: List[Flight] = []
    for row in session.execute(stmt).mappings():
        reserved_on = date(row["year"], row["month_id"], row["day_of_month"])
        flights.append(Flight.from_row(row, reserved_on))
    return flights
