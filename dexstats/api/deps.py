from fastapi import Depends
from sqlalchemy.orm import Session
from dexstats.config import settings
from dexstats.services.relayer_service import RelayerService
from dexstats.services.trade_service import TradeService
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.relayer_dao import RelayerDao
from dexstats.storage.daos.token_dao import TokenDao
from dexstats.storage.daos.trade_dao import TradeDao
from dexstats.storage.db import get_db


def get_trade_service(db: Session = Depends(get_db)) -> TradeService:
    return TradeService(TradeDao(db), PairDao(db), bot_addresses=settings.BOT_ADDRESSES)


def get_relayer_service(db: Session = Depends(get_db)) -> RelayerService:
    # read side only, the chain source is never touched from a request
    return RelayerService(None, TokenDao(db), PairDao(db), RelayerDao(db))


def get_pair_dao(db: Session = Depends(get_db)) -> PairDao:
    return PairDao(db)
