from datetime import date

from flights_db.booking import BookingOutcome
from flights_db.config import Settings
from flights_db.dataset import add_carrier, add_customer, add_flight
from flights_db.service import FlightService

DAY = date(2024, 5, 1)


def test_search_book_list_and_cancel(tmp_path):
    settings = Settings(url=f"sqlite+pysqlite:///{tmp_path / 'service.db'}", create_schema=True)

    with FlightService.open(settings) as service:
        with service.session_factory() as session:
            add_carrier(session, cid="AA", name="American Airlines Inc.")
            add_customer(session, handle="traveler", password="pw", name="Tara Traveler")
            for number, (origin, dest, minutes) in enumerate(
                [
                    ("Seattle WA", "Boston MA", 330.0),
                    ("Seattle WA", "Chicago IL", 230.0),
                    ("Chicago IL", "Boston MA", 130.0),
                ]
            ):
                add_flight(
                    session,
                    carrier_id="AA",
                    flight_num=str(number),
                    origin_city=origin,
                    dest_city=dest,
                    on_date=DAY,
                    actual_time=minutes,
                )
            session.commit()

        assert service.log_in("traveler", "wrong") is None
        user = service.log_in("traveler", "pw")
        assert user is not None

        itineraries = service.get_flights(DAY, "Seattle WA", "Boston MA")
        assert [len(itinerary) for itinerary in itineraries] == [1, 2]

        connection = itineraries[1]
        assert service.add_reservations(user, DAY, connection) is BookingOutcome.ADDED
        assert service.add_reservations(user, DAY, itineraries[0]) is BookingOutcome.DAY_FULL
        assert service.get_reservations(user) == list(connection.flights)

        service.remove_reservations(user, connection)
        assert service.get_reservations(user) == []
