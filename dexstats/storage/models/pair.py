from sqlalchemy import Column, Integer, String, Boolean, DateTime, UniqueConstraint, Index
from dexstats.storage.base import Base
from dexstats.storage.models.columns import BigInt, utcnow


class Pair(Base):
    __tablename__ = "pairs"

    id                   = Column(Integer, primary_key=True)
    base_token_symbol    = Column(String(32), nullable=False)
    base_token_address   = Column(String(42), nullable=False)      # 0x‑checksum
    base_token_decimals  = Column(Integer,    nullable=False)
    quote_token_symbol   = Column(String(32), nullable=False)
    quote_token_address  = Column(String(42), nullable=False)
    quote_token_decimals = Column(Integer,    nullable=False)
    relayer_address      = Column(String(42), nullable=False)
    # always True today, see DESIGN.md (hard delete vs soft flag)
    active               = Column(Boolean,    nullable=False, default=True)
    make_fee             = Column(BigInt,     nullable=False, default=0)
    take_fee             = Column(BigInt,     nullable=False, default=0)
    created_at           = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at           = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("base_token_address", "quote_token_address", "relayer_address",
                         name="uq_pairs_base_quote_relayer"),
        Index("ix_pairs_relayer", "relayer_address"),
    )

    @property
    def name(self) -> str:
        return f"{self.base_token_symbol}/{self.quote_token_symbol}"

    def __repr__(self) -> str:
        return f"<Pair {self.name} {self.base_token_address}/{self.quote_token_address} @ {self.relayer_address}>"
