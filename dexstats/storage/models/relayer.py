from sqlalchemy import Column, Integer, String, Boolean, DateTime
from dexstats.storage.base import Base
from dexstats.storage.models.columns import BigInt, utcnow


class Relayer(Base):
    __tablename__ = "relayers"

    id          = Column(Integer, primary_key=True)
    rid         = Column(Integer,    nullable=False, default=0)       # index in the registration contract
    owner       = Column(String(42), nullable=False)
    deposit     = Column(BigInt,     nullable=False, default=0)
    address     = Column(String(42), nullable=False, unique=True)     # coinbase
    resign      = Column(Boolean,    nullable=False, default=False)
    lock_time   = Column(BigInt,     nullable=False, default=0)
    make_fee    = Column(BigInt,     nullable=False, default=0)
    take_fee    = Column(BigInt,     nullable=False, default=0)
    lending_fee = Column(BigInt,     nullable=False, default=0)

    # operator managed, never written by the chain sync
    name        = Column(String(128), nullable=True)
    url         = Column(String(256), nullable=True)
    domain      = Column(String(256), nullable=True, index=True)

    created_at  = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at  = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Relayer #{self.rid} {self.address}>"
