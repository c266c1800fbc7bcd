from dexstats.storage.models.pair import Pair
from dexstats.storage.models.token import Token
from dexstats.storage.models.relayer import Relayer
from dexstats.storage.models.trade import Trade

__all__ = ["Pair", "Token", "Relayer", "Trade"]
