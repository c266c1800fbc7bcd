from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from dexstats.storage.base import Base
from dexstats.storage.models.columns import BigInt, utcnow


class Token(Base):
    __tablename__ = "tokens"

    id               = Column(Integer, primary_key=True)
    symbol           = Column(String(32), nullable=False)
    contract_address = Column(String(42), nullable=False)
    decimals         = Column(Integer,    nullable=False)
    relayer_address  = Column(String(42), nullable=False, index=True)
    make_fee         = Column(BigInt,     nullable=False, default=0)
    take_fee         = Column(BigInt,     nullable=False, default=0)
    created_at       = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at       = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("contract_address", "relayer_address", name="uq_tokens_contract_relayer"),
    )

    def __repr__(self) -> str:
        return f"<Token {self.symbol} {self.contract_address} @ {self.relayer_address}>"
