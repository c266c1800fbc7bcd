from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StatsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserVolume(StatsModel):
    user_address: str
    volume: int
    rank: int


class TradeVolume(StatsModel):
    trader: int
    total_volume: int


class UserPnL(StatsModel):
    user_address: str
    volume_ask: int = 0
    volume_bid: int = 0
    volume_ask_by_quote: int = 0
    volume_bid_by_quote: int = 0
    current_price: int = 0
    pnl: int = Field(0, alias="currentPnL")


class NumberTrader(StatsModel):
    active_user: int
    duration: str


class PairOut(StatsModel):
    base_token_symbol: str
    base_token_address: str
    base_token_decimals: int
    quote_token_symbol: str
    quote_token_address: str
    quote_token_decimals: int
    relayer_address: str
    active: bool
    make_fee: int
    take_fee: int


class RelayerOut(StatsModel):
    rid: int
    address: str
    owner: str
    deposit: int
    resign: bool
    lock_time: int
    make_fee: int
    take_fee: int
    lending_fee: int
    name: Optional[str] = None
    url: Optional[str] = None
    domain: Optional[str] = None
