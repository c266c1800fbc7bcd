import json
import pytest
from pydantic import ValidationError
from dexstats.schemas.trade import TradePayload
from dexstats.tests.factories import addr, order_hash, TOKEN_X, TOKEN_Y
from dexstats.utils.address import ZERO_ADDRESS, compute_trade_hash

MAKER, TAKER = addr(0xB1), addr(0xB2)

BASE = {
    "maker": MAKER.lower(),
    "taker": TAKER,
    "baseToken": TOKEN_X,
    "quoteToken": TOKEN_Y,
    "makerOrderHash": order_hash(1),
    "takerOrderHash": order_hash(2),
}


def test_presence_is_tracked_per_field():
    trade = TradePayload.model_validate({**BASE, "txHash": None, "amount": "1000000000000000000000"})

    assert "tx_hash" in trade.model_fields_set and trade.tx_hash is None
    assert "pair_name" not in trade.model_fields_set
    assert trade.amount == 10 ** 21
    assert trade.maker == MAKER


def test_dump_writes_back_exactly_the_given_keys():
    given = {**BASE, "maker": MAKER, "txHash": None, "pricepoint": "250", "status": "SUCCESS"}

    dumped = TradePayload.model_validate(given).dump()

    assert set(dumped) == set(given)
    assert dumped["txHash"] is None
    assert dumped["pricepoint"] == "250"


def test_zero_addresses_and_hashes_are_omitted():
    trade = TradePayload.model_validate({**BASE, "makerExchange": ZERO_ADDRESS, "txHash": "0x0"})

    dumped = trade.dump()

    assert "makerExchange" not in dumped
    assert "txHash" not in dumped


@pytest.mark.parametrize("field", ["makerOrderHash", "baseToken", "quoteToken", "maker", "taker"])
def test_required_fields(field):
    payload = {k: v for k, v in BASE.items() if k != field}
    with pytest.raises(ValidationError):
        TradePayload.model_validate(payload)


def test_bad_address_is_rejected():
    with pytest.raises(ValidationError):
        TradePayload.model_validate({**BASE, "takerExchange": "0x1234"})


def test_hash_is_derived_from_order_hashes():
    trade = TradePayload.model_validate(BASE)
    row = trade.to_row()

    assert row["hash"] == compute_trade_hash(order_hash(1), order_hash(2))
    assert "tx_hash" not in row


def test_json_line_roundtrip_through_store(trade_dao):
    line = json.dumps({**BASE, "amount": 500, "pricepoint": 7, "takerOrderSide": "BUY"})
    trade = TradePayload.model_validate_json(line)

    trade_dao.upsert(trade.to_row())
    trade_dao.upsert(trade.model_copy(update={"amount": 600}).to_row())

    stored = trade_dao.get_by_hash(trade.trade_hash)
    assert stored.amount == 600
    back = TradePayload.from_row(stored).dump()
    assert back["amount"] == "600"
    assert back["maker"] == MAKER
    assert back["takerOrderSide"] == "BUY"
