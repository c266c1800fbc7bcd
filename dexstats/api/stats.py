from datetime import timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from dexstats.api.deps import get_trade_service, get_relayer_service, get_pair_dao
from dexstats.api.params import parse_address, parse_addresses, parse_int, parse_duration, parse_timestamp
from dexstats.config.settings import DEFAULT_TOP
from dexstats.errors import NotFoundError
from dexstats.schemas.stats import UserVolume, UserPnL, TradeVolume, NumberTrader, PairOut, RelayerOut
from dexstats.services.filters import VolumeFilter, PnLFilter, TraderCountFilter
from dexstats.services.relayer_service import RelayerService
from dexstats.services.trade_service import TradeService
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.models.columns import utcnow
from dexstats.utils.address import is_zero_address
import logging

log = logging.getLogger(__name__)

router = APIRouter()


def volume_filter(
    baseToken: List[str] = Query(default=[]),
    quoteToken: Optional[str] = None,
    relayerAddress: Optional[str] = None,
    userAddress: Optional[str] = None,
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    top: Optional[str] = None,
) -> VolumeFilter:
    return VolumeFilter(
        relayer_address=parse_address(relayerAddress, "relayer"),
        user_address=parse_address(userAddress, "user"),
        base_tokens=parse_addresses(baseToken, "baseToken"),
        quote_token=parse_address(quoteToken, "quoteToken"),
        from_time=parse_timestamp(from_, "from"),
        to_time=parse_timestamp(to, "to"),
        top=parse_int(top, "top", DEFAULT_TOP),
    )


@router.get("/trades/volume", response_model=List[UserVolume])
@router.get("/trades/total", response_model=List[UserVolume])
def query_volume(f: VolumeFilter = Depends(volume_filter), svc: TradeService = Depends(get_trade_service)):
    return svc.query_volume(f)


@router.get("/trades/volume24h", response_model=List[UserVolume])
def query_24h_volume(f: VolumeFilter = Depends(volume_filter), svc: TradeService = Depends(get_trade_service)):
    return svc.query_24h_volume(f)


@router.get("/trades/summary", response_model=TradeVolume)
def query_total(f: VolumeFilter = Depends(volume_filter), svc: TradeService = Depends(get_trade_service)):
    return svc.query_total(f)


@router.get("/trades/top/pnl", response_model=List[UserPnL])
def top_pnl(
    baseToken: Optional[str] = None,
    quoteToken: Optional[str] = None,
    relayerAddress: Optional[str] = None,
    top: Optional[str] = None,
    svc: TradeService = Depends(get_trade_service),
):
    f = PnLFilter(
        relayer_address=parse_address(relayerAddress, "relayer"),
        base_token=parse_address(baseToken, "baseToken"),
        quote_token=parse_address(quoteToken, "quoteToken"),
        top=parse_int(top, "top", DEFAULT_TOP),
    )
    return svc.get_relayer_top_pnl(f)


@router.get("/trades/users/count", response_model=NumberTrader)
def count_users(
    relayerAddress: Optional[str] = None,
    baseToken: Optional[str] = None,
    quoteToken: Optional[str] = None,
    duration: Optional[str] = None,
    excludeBot: Optional[str] = None,
    svc: TradeService = Depends(get_trade_service),
):
    days = parse_duration(duration)
    f = TraderCountFilter(
        relayer_address=parse_address(relayerAddress, "relayer"),
        base_token=parse_address(baseToken, "baseToken"),
        quote_token=parse_address(quoteToken, "quoteToken"),
        since=int((utcnow() - timedelta(days=days)).timestamp()) if days else 0,
        exclude_bot=excludeBot == "true",
    )
    return NumberTrader(active_user=svc.get_number_trader_by_time(f), duration=duration or "all")


@router.get("/pairs", response_model=List[PairOut])
def list_pairs(relayerAddress: Optional[str] = None, pair_dao: PairDao = Depends(get_pair_dao)):
    relayer = parse_address(relayerAddress, "relayer")
    if is_zero_address(relayer):
        return pair_dao.get_active_pairs()
    return pair_dao.get_active_pairs_by_relayer(relayer)


@router.get("/relayer", response_model=RelayerOut)
def get_relayer(
    request: Request,
    relayerAddress: Optional[str] = None,
    svc: RelayerService = Depends(get_relayer_service),
):
    address = svc.resolve_relayer_address(
        parse_address(relayerAddress, "relayer") if relayerAddress else None,
        request.headers.get("host"),
    )
    relayer = None if is_zero_address(address) else svc.get_by_address(address)
    if relayer is None:
        raise NotFoundError(f"Relayer {address} not found")
    return relayer
