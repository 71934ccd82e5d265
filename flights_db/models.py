"""SQLAlchemy models and value objects for the flight reservation system."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as date_type
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Carrier(Base):
    __tablename__ = "carriers"

    cid: Mapped[str] = mapped_column(String(8), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    flights: Mapped[List["FlightRecord"]] = relationship(back_populates="carrier")


class FlightRecord(Base):
    __tablename__ = "flights"

    fid: Mapped[int] = mapped_column(primary_key=True)
    carrier_id: Mapped[str] = mapped_column(ForeignKey("carriers.cid"), nullable=False)
    flight_num: Mapped[str] = mapped_column(String(10), nullable=False)
    origin_city: Mapped[str] = mapped_column(String(60), nullable=False, index=True)
    dest_city: Mapped[str] = mapped_column(String(60), nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month_id: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_time: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    carrier: Mapped[Carrier] = relationship(back_populates="flights")


class Customer(Base):
    __tablename__ = "customer"
    __table_args__ = (UniqueConstraint("handle", name="uq_customer_handle"),)

    uid: Mapped[int] = mapped_column(primary_key=True)
    handle: Mapped[str] = mapped_column(String(20), nullable=False)
    password: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)


class Reservation(Base):
    """A (customer, flight) pair. Duplicates are prevented at booking time, not by a key."""

    __tablename__ = "reservation"

    rid: Mapped[int] = mapped_column(primary_key=True)
    uid: Mapped[int] = mapped_column(ForeignKey("customer.uid"), nullable=False, index=True)
    fid: Mapped[int] = mapped_column(ForeignKey("flights.fid"), nullable=False, index=True)


def _minutes(actual_time: Optional[float]) -> Optional[int]:
    return None if actual_time is None else int(actual_time)


@dataclass(frozen=True)
class User:
    id: int
    handle: str
    display_name: str

    @classmethod
    def from_customer(cls, customer: Customer) -> "User":
        return cls(id=customer.uid, handle=customer.handle, display_name=customer.name)


@dataclass(frozen=True)
class Flight:
    """A flight as seen by callers. Two flights are equal when their ids are.

    ``duration_minutes`` is ``None`` when no actual flight time was recorded;
    search never returns such flights, but reservations may refer to them.
    """

    id: int
    date: date_type = field(compare=False)
    carrier_name: str = field(compare=False)
    flight_number: str = field(compare=False)
    origin_city: str = field(compare=False)
    dest_city: str = field(compare=False)
    duration_minutes: Optional[int] = field(compare=False)

    @classmethod
    def from_row(cls, row: Mapping[str, Any], flight_date: date_type, *, suffix: str = "") -> "Flight":
        """Build a flight from labelled result columns (``fid``, ``name``, ...)."""

        return cls(
            id=int(row[f"fid{suffix}"]),
            date=flight_date,
            carrier_name=row[f"name{suffix}"],
            flight_number=str(row[f"flight_num{suffix}"]),
            origin_city=row[f"origin_city{suffix}"],
            dest_city=row[f"dest_city{suffix}"],
            duration_minutes=_minutes(row[f"actual_time{suffix}"]),
        )

    @classmethod
    def from_record(cls, record: FlightRecord) -> "Flight":
        return cls(
            id=record.fid,
            date=date_type(record.year, record.month_id, record.day_of_month),
            carrier_name=record.carrier.name,
            flight_number=record.flight_num,
            origin_city=record.origin_city,
            dest_city=record.dest_city,
            duration_minutes=_minutes(record.actual_time),
        )


@dataclass(frozen=True)
class Itinerary:
    flights: Tuple[Flight, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "flights", tuple(self.flights))
        if len(self.flights) not in (1, 2):
            raise ValueError("an itinerary holds one or two flights")
        if len(self.flights) == 2:
            first, second = self.flights
            if first == second:
                raise ValueError("an itinerary cannot hold the same flight twice")
            if first.dest_city != second.origin_city:
                raise ValueError("connecting flights must share the layover city")
            if first.date != second.date:
                raise ValueError("connecting flights must depart on the same date")

    @classmethod
    def of(cls, *flights: Flight) -> "Itinerary":
        return cls(tuple(flights))

    @property
    def is_direct(self) -> bool:
        return len(self.flights) == 1

    @property
    def date(self) -> date_type:
        return self.flights[0].date

    @property
    def origin_city(self) -> str:
        return self.flights[0].origin_city

    @property
    def dest_city(self) -> str:
        return self.flights[-1].dest_city

    @property
    def total_minutes(self) -> Optional[int]:
        durations = [flight.duration_minutes for flight in self.flights]
        if None in durations:
            return None
        return sum(durations)

    def __iter__(self) -> Iterator[Flight]:
        return iter(self.flights)

    def __len__(self) -> int:
        return len(self.flights)


def as_itinerary(flights: Sequence[Flight] | Itinerary) -> Itinerary:
    """Return ``flights`` as an :class:`Itinerary`, raising ``ValueError`` for a malformed one."""

    if isinstance(flights, Itinerary):
        return flights
    return Itinerary(tuple(flights))


def as_flights(flights: Sequence[Flight] | Itinerary) -> Tuple[Flight, ...]:
    if isinstance(flights, Itinerary):
        return flights.flights
    return tuple(flights)
