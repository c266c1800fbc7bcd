from sqlalchemy import Column, Integer, String, DateTime, Index
from dexstats.storage.base import Base
from dexstats.storage.models.columns import BigInt, utcnow

TRADE_STATUS_PENDING = "PENDING"
TRADE_STATUS_SUCCESS = "SUCCESS"
TRADE_STATUS_ERROR = "ERROR"


class Trade(Base):
    __tablename__ = "trades"

    id               = Column(Integer, primary_key=True, autoincrement=True)
    # ─── parties ──────────────────────────────────────────────────────
    taker            = Column(String(42), nullable=False)
    maker            = Column(String(42), nullable=False)
    # ─── pair ─────────────────────────────────────────────────────────
    base_token       = Column(String(42), nullable=False)
    quote_token      = Column(String(42), nullable=False)
    pair_name        = Column(String(64), nullable=True)
    # ─── identity ─────────────────────────────────────────────────────
    maker_order_hash = Column(String(66), nullable=False)
    taker_order_hash = Column(String(66), nullable=True)
    hash             = Column(String(66), nullable=False, unique=True)   # keccak(maker ‖ taker order hash)
    tx_hash          = Column(String(66), nullable=True)
    # ─── economics (raw token units) ──────────────────────────────────
    pricepoint       = Column(BigInt, nullable=True)
    amount           = Column(BigInt, nullable=True)
    make_fee         = Column(BigInt, nullable=True)
    take_fee         = Column(BigInt, nullable=True)
    status           = Column(String(16), nullable=True)
    # ─── order context ────────────────────────────────────────────────
    taker_order_side = Column(String(8),  nullable=True)     # BUY / SELL
    taker_order_type = Column(String(16), nullable=True)
    maker_order_type = Column(String(16), nullable=True)
    maker_exchange   = Column(String(42), nullable=True)     # relayer coinbase
    taker_exchange   = Column(String(42), nullable=True)

    created_at       = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at       = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_trades_pair_created", "base_token", "quote_token", "created_at"),
        Index("ix_trades_maker", "maker"),
        Index("ix_trades_taker", "taker"),
    )

    def __repr__(self) -> str:
        return f"<Trade {self.hash} {self.pair_name} {self.amount}@{self.pricepoint}>"
