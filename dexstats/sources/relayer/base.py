from abc import ABC, abstractmethod
from typing import List, Optional
from dexstats.sources.relayer.types import RInfo, LendingInfo


class RelayerSource(ABC):
    """Authoritative on-chain view of the relayer fleet.

    Implementations raise RelayerSourceError on any fetch failure and do not
    retry; the caller of a sync pass decides whether to try again.
    """

    @abstractmethod
    def get_relayer(self, address: str) -> RInfo:
        pass

    @abstractmethod
    def get_relayers(self) -> List[RInfo]:
        pass

    @abstractmethod
    def get_lending(self, address: str) -> Optional[LendingInfo]:
        pass

    @abstractmethod
    def get_lendings(self) -> List[LendingInfo]:
        pass
