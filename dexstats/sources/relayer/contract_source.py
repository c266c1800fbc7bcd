from typing import List, Optional
from web3 import Web3
from dexstats.config import settings
from dexstats.errors import RelayerSourceError
from dexstats.sources.relayer.base import RelayerSource
from dexstats.sources.relayer.client import get_web3_client
from dexstats.sources.relayer.token_meta import get_token_meta
from dexstats.sources.relayer.types import RInfo, LendingInfo, PairInfo
from dexstats.utils.address import to_address, is_zero_address
import logging

log = logging.getLogger(__name__)


class ContractRelayerSource(RelayerSource):
    """Reads the RelayerRegistration and LendingRelayerRegistration contracts.

    The registration contract exposes one trade fee per relayer; it is used
    for both the make and the take side.
    """

    def __init__(
        self,
        w3: Optional[Web3] = None,
        registration_address: str = settings.RELAYER_REGISTRATION_ADDRESS,
        lending_address: str = settings.LENDING_REGISTRATION_ADDRESS,
    ):
        self.w3 = w3 or get_web3_client()
        self.registration = self.w3.eth.contract(
            address=to_address(registration_address), abi=settings.RELAYER_REGISTRATION_ABI
        )
        self.lending = self.w3.eth.contract(
            address=to_address(lending_address), abi=settings.LENDING_REGISTRATION_ABI
        )

    def _coinbases(self) -> List[str]:
        count = self.registration.functions.RelayerCount().call()
        coinbases = []
        for i in range(count):
            coinbase = self.registration.functions.RELAYER_COINBASES(i).call()
            # slots of removed relayers are zeroed, not compacted
            if not is_zero_address(coinbase):
                coinbases.append(to_address(coinbase))
        return coinbases

    def _read_relayer(self, coinbase: str) -> RInfo:
        index, owner, deposit, trade_fee, from_tokens, to_tokens = \
            self.registration.functions.getRelayerByCoinbase(coinbase).call()
        if is_zero_address(owner):
            raise RelayerSourceError(f"relayer {coinbase} is not registered")
        lock_time = self.registration.functions.RESIGN_REQUESTS(coinbase).call()

        pairs = [PairInfo(to_address(b), to_address(q)) for b, q in zip(from_tokens, to_tokens)]
        tokens = {}
        for token in {t for p in pairs for t in p}:
            tokens[token] = get_token_meta(self.w3, token)

        return RInfo(
            rid=int(index),
            address=coinbase,
            owner=to_address(owner),
            deposit=int(deposit),
            resign=lock_time > 0,
            lock_time=int(lock_time),
            make_fee=int(trade_fee),
            take_fee=int(trade_fee),
            tokens=tokens,
            pairs=pairs,
        )

    def _read_lending(self, coinbase: str) -> Optional[LendingInfo]:
        trade_fee, base_tokens, terms, collaterals = \
            self.lending.functions.getLendingRelayerByCoinbase(coinbase).call()
        if not base_tokens and not trade_fee:
            return None
        return LendingInfo(address=coinbase, fee=int(trade_fee))

    def get_relayer(self, address: str) -> RInfo:
        coinbase = to_address(address)
        try:
            return self._read_relayer(coinbase)
        except RelayerSourceError:
            raise
        except Exception as e:
            raise RelayerSourceError(f"failed to read relayer {coinbase}: {e}") from e

    def get_relayers(self) -> List[RInfo]:
        try:
            infos = [self._read_relayer(c) for c in self._coinbases()]
        except Exception as e:
            raise RelayerSourceError(f"failed to read relayer fleet: {e}") from e
        log.info(f"Fetched {len(infos)} relayers from chain")
        return infos

    def get_lending(self, address: str) -> Optional[LendingInfo]:
        coinbase = to_address(address)
        try:
            return self._read_lending(coinbase)
        except Exception as e:
            raise RelayerSourceError(f"failed to read lending relayer {coinbase}: {e}") from e

    def get_lendings(self) -> List[LendingInfo]:
        try:
            infos = [self._read_lending(c) for c in self._coinbases()]
        except Exception as e:
            raise RelayerSourceError(f"failed to read lending fleet: {e}") from e
        return [i for i in infos if i is not None]
