from datetime import date

from flights_db.ledger import (
    count_reservations_for_flight,
    count_reservations_for_user_on_date,
    delete_reservation,
    insert_reservation,
    list_reservations_for_user,
)
from flights_db.models import Itinerary

DAY = date(2024, 5, 1)


def test_counts_follow_inserts_and_deletes(session_factory, make_flight, make_user):
    flight = make_flight()
    later = make_flight(on_date=date(2024, 5, 3))
    user = make_user()

    with session_factory() as session:
        insert_reservation(session, user.id, flight.id)
        insert_reservation(session, user.id, flight.id)
        insert_reservation(session, user.id, later.id)
        assert count_reservations_for_flight(session, flight.id) == 2
        assert count_reservations_for_user_on_date(session, user.id, DAY) == 2
        assert count_reservations_for_user_on_date(session, user.id, date(2024, 5, 3)) == 1
        assert count_reservations_for_user_on_date(session, user.id, date(2024, 5, 2)) == 0

        assert delete_reservation(session, user.id, flight.id) == 2
        assert delete_reservation(session, user.id, flight.id) == 0
        assert count_reservations_for_flight(session, flight.id) == 0
        session.commit()


def test_counts_are_zero_for_unknown_ids(session_factory):
    with session_factory() as session:
        assert count_reservations_for_flight(session, 12345) == 0
        assert count_reservations_for_user_on_date(session, 12345, DAY) == 0


def test_list_reservations_carries_each_flight_date(session_factory, make_flight, make_user):
    later = make_flight("Boston MA", "Seattle WA", on_date=date(2024, 5, 8), carrier_id="DL")
    earlier = make_flight(on_date=DAY)
    user = make_user()
    other = make_user()

    with session_factory() as session:
        insert_reservation(session, user.id, later.id)
        insert_reservation(session, user.id, earlier.id)
        insert_reservation(session, other.id, earlier.id)
        session.commit()

    with session_factory() as session:
        flights = list_reservations_for_user(session, user.id)

    assert flights == [earlier, later]
    assert [flight.date for flight in flights] == [DAY, date(2024, 5, 8)]
    assert flights[1].carrier_name == "Delta Air Lines Inc."
    assert flights[1].origin_city == "Boston MA"


def test_unrecorded_flight_time_is_reported_as_unknown(session_factory, make_flight, make_user):
    flight = make_flight(actual_time=None)
    user = make_user()

    with session_factory() as session:
        insert_reservation(session, user.id, flight.id)
        session.commit()

    with session_factory() as session:
        (reserved,) = list_reservations_for_user(session, user.id)

    assert reserved.duration_minutes is None
    assert Itinerary.of(reserved).total_minutes is None
