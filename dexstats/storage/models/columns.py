from datetime import datetime, timezone
from sqlalchemy import Numeric
from sqlalchemy.types import TypeDecorator


class BigInt(TypeDecorator):
    """uint256-sized integer. Stored as NUMERIC(78, 0), surfaced as int."""

    impl = Numeric(78, 0)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
