from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel
from dexstats.errors import InvalidAddressError
from dexstats.storage.models.trade import Trade
from dexstats.utils.address import to_address, to_hash, is_zero_address, is_zero_hash, compute_trade_hash

ADDRESS_FIELDS = ("taker", "maker", "base_token", "quote_token", "maker_exchange", "taker_exchange")
HASH_FIELDS = ("maker_order_hash", "taker_order_hash", "hash", "tx_hash")
BIGINT_FIELDS = ("pricepoint", "amount", "make_fee", "take_fee")
REQUIRED_FIELDS = ("maker_order_hash", "base_token", "quote_token", "maker", "taker")


class TradePayload(BaseModel):
    """Wire form of a trade (camelCase JSON).

    Every field is optional at the type level so a payload keeps track of
    what it was given: a key left out is absent (not in `model_fields_set`),
    an explicit null is present with value None. `dump()` writes back
    exactly the keys that were set.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    taker: Optional[str] = None
    maker: Optional[str] = None
    base_token: Optional[str] = None
    quote_token: Optional[str] = None
    maker_order_hash: Optional[str] = None
    taker_order_hash: Optional[str] = None
    hash: Optional[str] = None
    tx_hash: Optional[str] = None
    pair_name: Optional[str] = None
    pricepoint: Optional[int] = None
    amount: Optional[int] = None
    make_fee: Optional[int] = None
    take_fee: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    taker_order_side: Optional[str] = None
    taker_order_type: Optional[str] = None
    maker_order_type: Optional[str] = None
    maker_exchange: Optional[str] = None
    taker_exchange: Optional[str] = None

    @field_validator(*ADDRESS_FIELDS)
    @classmethod
    def _address(cls, v):
        if v is None:
            return v
        try:
            return to_address(v)
        except InvalidAddressError as e:
            raise ValueError(str(e)) from e

    @field_validator(*HASH_FIELDS)
    @classmethod
    def _hash(cls, v):
        return v if v is None else to_hash(v)

    @field_serializer(*BIGINT_FIELDS)
    def _bigint(self, v):
        # uint256 values do not fit a JSON double
        return v if v is None else str(v)

    @model_validator(mode="after")
    def _required(self):
        missing = [to_camel(f) for f in REQUIRED_FIELDS if getattr(self, f) is None]
        if missing:
            raise ValueError(f"{', '.join(missing)} not set")
        return self

    @property
    def trade_hash(self) -> str:
        """Given hash, or the one derived from the two order hashes."""
        if self.hash and not is_zero_hash(self.hash):
            return self.hash
        return compute_trade_hash(self.maker_order_hash, self.taker_order_hash)

    def dump(self, exclude_unset: bool = True) -> Dict:
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)
        for name in ADDRESS_FIELDS:
            key = to_camel(name)
            if data.get(key) is not None and is_zero_address(data[key]):
                del data[key]
        for name in HASH_FIELDS:
            key = to_camel(name)
            if data.get(key) is not None and is_zero_hash(data[key]):
                del data[key]
        return data

    def to_row(self) -> Dict:
        """Column values for TradeDao.upsert. Unset fields are left out so an
        upsert never clears what is already stored."""
        row = {name: getattr(self, name) for name in self.model_fields_set}
        row["hash"] = self.trade_hash
        return row

    @classmethod
    def from_row(cls, trade: Trade) -> "TradePayload":
        values = {name: getattr(trade, name) for name in cls.model_fields if getattr(trade, name) is not None}
        return cls(**values)
