from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple


class TokenInfo(NamedTuple):
    symbol: str
    decimals: int


class PairInfo(NamedTuple):
    base_token: str
    quote_token: str


@dataclass
class RInfo:
    """One relayer as read from the registration contract. Addresses are
    checksummed by the source before they get here."""
    address: str
    owner: str
    rid: int = 0
    deposit: int = 0
    resign: bool = False
    lock_time: int = 0
    make_fee: int = 0
    take_fee: int = 0
    tokens: Dict[str, TokenInfo] = field(default_factory=dict)
    pairs: List[PairInfo] = field(default_factory=list)


@dataclass
class LendingInfo:
    address: str
    fee: int = 0
