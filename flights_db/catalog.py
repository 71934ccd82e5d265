"""Direct and one-connection flight search."""
from __future__ import annotations

import logging
from datetime import date
from typing import List

from sqlalchemy import Select, and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased, sessionmaker

from .errors import DataAccessFault
from .models import Carrier, Flight, FlightRecord, Itinerary

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 99


def _flight_columns(flight, carrier, suffix: str = "") -> list:
    return [
        flight.fid.label(f"fid{suffix}"),
        carrier.name.label(f"name{suffix}"),
        flight.flight_num.label(f"flight_num{suffix}"),
        flight.origin_city.label(f"origin_city{suffix}"),
        flight.dest_city.label(f"dest_city{suffix}"),
        flight.actual_time.label(f"actual_time{suffix}"),
    ]


def direct_flights_query(on_date: date, origin_city: str, dest_city: str) -> Select:
    return (
        select(*_flight_columns(FlightRecord, Carrier))
        .select_from(FlightRecord)
        .join(Carrier, FlightRecord.carrier_id == Carrier.cid)
        .where(
            FlightRecord.actual_time.is_not(None),
            FlightRecord.year == on_date.year,
            FlightRecord.month_id == on_date.month,
            FlightRecord.day_of_month == on_date.day,
            FlightRecord.origin_city == origin_city,
            FlightRecord.dest_city == dest_city,
        )
        .order_by(FlightRecord.actual_time.asc())
        .limit(MAX_SEARCH_RESULTS)
    )


def two_hop_flights_query(on_date: date, origin_city: str, dest_city: str) -> Select:
    """Pairs of flights meeting in a layover city, both flown on ``on_date``.

    Layover duration is not constrained; a second leg may depart before the
    first one lands.
    """

    f1 = aliased(FlightRecord, name="f1")
    f2 = aliased(FlightRecord, name="f2")
    c1 = aliased(Carrier, name="c1")
    c2 = aliased(Carrier, name="c2")
    return (
        select(*_flight_columns(f1, c1, "1"), *_flight_columns(f2, c2, "2"))
        .select_from(f1)
        .join(
            f2,
            and_(
                f1.dest_city == f2.origin_city,
                f2.year == f1.year,
                f2.month_id == f1.month_id,
                f2.day_of_month == f1.day_of_month,
            ),
        )
        .join(c1, c1.cid == f1.carrier_id)
        .join(c2, c2.cid == f2.carrier_id)
        .where(
            f1.actual_time.is_not(None),
            f2.actual_time.is_not(None),
            f1.year == on_date.year,
            f1.month_id == on_date.month,
            f1.day_of_month == on_date.day,
            f1.origin_city == origin_city,
            f2.dest_city == dest_city,
        )
        .order_by((f1.actual_time + f2.actual_time).asc())
        .limit(MAX_SEARCH_RESULTS)
    )


class FlightCatalog:
    """Read-only itinerary lookups against the injected session factory."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def direct_itineraries(self, on_date: date, origin_city: str, dest_city: str) -> List[Itinerary]:
        stmt = direct_flights_query(on_date, origin_city, dest_city)
        rows = self._fetch(stmt)
        return [Itinerary.of(Flight.from_row(row, on_date)) for row in rows]

    def connecting_itineraries(self, on_date: date, origin_city: str, dest_city: str) -> List[Itinerary]:
        stmt = two_hop_flights_query(on_date, origin_city, dest_city)
        rows = self._fetch(stmt)
        return [
            Itinerary.of(
                Flight.from_row(row, on_date, suffix="1"),
                Flight.from_row(row, on_date, suffix="2"),
            )
            for row in rows
        ]

    def find_itineraries(self, on_date: date, origin_city: str, dest_city: str) -> List[Itinerary]:
        """Direct itineraries by flight time, followed by connections by total flight time."""

        itineraries = self.direct_itineraries(on_date, origin_city, dest_city)
        itineraries.extend(self.connecting_itineraries(on_date, origin_city, dest_city))
        logger.debug(
            "Found %d itineraries %s -> %s on %s",
            len(itineraries),
            origin_city,
            dest_city,
            on_date.isoformat(),
        )
        return itineraries

    def _fetch(self, stmt: Select) -> list:
        try:
            with self.session_factory() as session:
                return list(session.execute(stmt).mappings())
        except SQLAlchemyError as exc:
            raise DataAccessFault(f"flight search failed: {exc}") from exc
