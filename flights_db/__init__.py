"""Flight search and seat reservation package."""
from .auth import Authenticator
from .booking import MAX_FLIGHT_BOOKINGS, BookingCoordinator, BookingOutcome
from .catalog import MAX_SEARCH_RESULTS, FlightCatalog
from .config import Settings, load_settings
from .database import create_session_factory, init_db, serializable_scope, session_scope
from .dataset import generate_sample_data
from .errors import AuthenticationFailure, DataAccessFault, FlightsDBError
from .models import Flight, Itinerary, User
from .service import FlightService

__all__ = [
    "Authenticator",
    "AuthenticationFailure",
    "BookingCoordinator",
    "BookingOutcome",
    "DataAccessFault",
    "Flight",
    "FlightCatalog",
    "FlightService",
    "FlightsDBError",
    "Itinerary",
    "MAX_FLIGHT_BOOKINGS",
    "MAX_SEARCH_RESULTS",
    "Settings",
    "User",
    "create_session_factory",
    "generate_sample_data",
    "init_db",
    "load_settings",
    "serializable_scope",
    "session_scope",
]
