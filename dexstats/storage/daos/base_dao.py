from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from dexstats.errors import StoreError
import logging

log = logging.getLogger(__name__)


class BaseDao:
    """Session is injected by whoever owns the Database; every write commits
    on its own (one row, one transaction)."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _reading(self, what: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"{what} failed: {e}") from e

    @contextmanager
    def _writing(self, what: str):
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            log.debug(f"{what} rolled back: {e}")
            raise StoreError(f"{what} failed: {e}") from e
