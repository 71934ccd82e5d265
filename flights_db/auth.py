"""Customer login."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .errors import AuthenticationFailure, DataAccessFault
from .models import Customer, User

logger = logging.getLogger(__name__)


class Authenticator:
    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def authenticate(self, handle: str, password: str) -> User:
        """Return the customer matching ``handle``/``password`` or raise :class:`AuthenticationFailure`."""

        stmt = select(Customer).where(Customer.handle == handle, Customer.password == password)
        try:
            with self.session_factory() as session:
                customer = session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise DataAccessFault(f"login lookup failed: {exc}") from exc
        if customer is None:
            raise AuthenticationFailure(handle)
        return User.from_customer(customer)

    def log_in(self, handle: str, password: str) -> Optional[User]:
        try:
            return self.authenticate(handle, password)
        except AuthenticationFailure as exc:
            logger.warning("Login rejected: %s", exc)
            return None
