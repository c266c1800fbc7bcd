from types import SimpleNamespace
from dexstats.services.reconciler import (
    diff_tokens, diff_pairs, diff_relayers, build_relayer_record, token_record, pair_record,
)
from dexstats.sources.relayer.types import LendingInfo, TokenInfo
from dexstats.tests.factories import rinfo, RELAYER_1, RELAYER_2, TOKEN_X, TOKEN_Y, TOKEN_Z


def mirror_tokens(info):
    return [SimpleNamespace(**token_record(info, a)) for a in info.tokens]


def mirror_pairs(info):
    return [SimpleNamespace(**pair_record(info, p.base_token, p.quote_token)) for p in info.pairs]


def test_new_snapshot_against_empty_mirror_creates_everything():
    info = rinfo(pairs=[(TOKEN_X, TOKEN_Y), (TOKEN_Z, TOKEN_Y)])

    tokens = diff_tokens(info, [])
    pairs = diff_pairs(info, [])

    assert sorted(t["contract_address"] for t in tokens.creates) == sorted([TOKEN_X, TOKEN_Y, TOKEN_Z])
    assert not tokens.updates and not tokens.deletes
    assert [(p["base_token_address"], p["quote_token_address"]) for p in pairs.creates] == [
        (TOKEN_X, TOKEN_Y), (TOKEN_Z, TOKEN_Y),
    ]
    assert all(p["active"] for p in pairs.creates)


def test_reconciling_the_same_snapshot_twice_is_empty():
    info = rinfo(pairs=[(TOKEN_X, TOKEN_Y), (TOKEN_Z, TOKEN_Y)])
    record = build_relayer_record(info, LendingInfo(RELAYER_1, 5))

    assert diff_tokens(info, mirror_tokens(info)).empty
    assert diff_pairs(info, mirror_pairs(info)).empty
    assert diff_relayers([record], [SimpleNamespace(**record)], sweep=True).empty


def test_token_update_carries_only_changed_fields():
    old = rinfo(fee=10)
    new = rinfo(fee=25)

    delta = diff_tokens(new, mirror_tokens(old))

    assert not delta.creates and not delta.deletes
    assert sorted(a for a, _ in delta.updates) == sorted([TOKEN_X, TOKEN_Y])
    assert all(fields == {"make_fee": 25, "take_fee": 25} for _, fields in delta.updates)


def test_token_missing_from_snapshot_is_deleted():
    old = rinfo(pairs=[(TOKEN_X, TOKEN_Y), (TOKEN_Z, TOKEN_Y)])
    new = rinfo(pairs=[(TOKEN_X, TOKEN_Y)])

    assert diff_tokens(new, mirror_tokens(old)).deletes == [TOKEN_Z]


def test_pair_with_unknown_token_fails_alone():
    info = rinfo(
        pairs=[(TOKEN_X, TOKEN_Y), (TOKEN_Z, TOKEN_Y)],
        tokens={TOKEN_X: TokenInfo("X", 18), TOKEN_Y: TokenInfo("Y", 6)},
    )

    delta = diff_pairs(info, [])

    assert [(p["base_token_address"], p["quote_token_address"]) for p in delta.creates] == [(TOKEN_X, TOKEN_Y)]
    assert delta.creates[0]["quote_token_decimals"] == 6
    assert len(delta.failures) == 1
    assert delta.failures[0].pair_key == (TOKEN_Z, TOKEN_Y)
    assert delta.failures[0].token == TOKEN_Z


def test_pair_dropped_from_snapshot_is_one_delete_and_no_creates():
    old = rinfo(pairs=[(TOKEN_X, TOKEN_Y)])
    new = rinfo(pairs=[], tokens={})

    delta = diff_pairs(new, mirror_pairs(old))

    assert delta.creates == []
    assert delta.deletes == [(TOKEN_X, TOKEN_Y)]


def test_pair_listed_twice_in_snapshot_is_created_once():
    info = rinfo(pairs=[(TOKEN_X, TOKEN_Y), (TOKEN_X, TOKEN_Y)])
    assert len(diff_pairs(info, []).creates) == 1


def test_lending_fee_defaults_to_zero():
    assert build_relayer_record(rinfo(), None)["lending_fee"] == 0
    assert build_relayer_record(rinfo(), LendingInfo(RELAYER_1, 7))["lending_fee"] == 7


def test_relayer_resign_is_an_update():
    before = build_relayer_record(rinfo())
    after = build_relayer_record(rinfo(resign=True, lock_time=1700000000))

    delta = diff_relayers([after], [SimpleNamespace(**before)])

    assert delta.updates == [(RELAYER_1, {"resign": True, "lock_time": 1700000000})]


def test_fleet_sweep_deletes_only_when_asked():
    r1 = build_relayer_record(rinfo(RELAYER_1))
    r2 = build_relayer_record(rinfo(RELAYER_2))
    mirror = [SimpleNamespace(**r1), SimpleNamespace(**r2)]

    assert diff_relayers([r1], mirror).deletes == []
    assert diff_relayers([r1], mirror, sweep=True).deletes == [RELAYER_2]
