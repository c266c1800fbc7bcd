from typing import Optional, Tuple
from web3 import Web3
from dexstats.errors import InvalidAddressError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_HASH = "0x" + "00" * 32


def is_hex_address(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    raw = value[2:] if value[:2].lower() == "0x" else value
    if len(raw) != 40:
        return False
    try:
        int(raw, 16)
    except ValueError:
        return False
    return True


def to_address(value: Optional[str]) -> str:
    """Checksum form of `value`. Case of the input is ignored, so mixed-case
    input that would fail EIP-55 is still accepted."""
    if not is_hex_address(value):
        raise InvalidAddressError(f"Invalid address: {value!r}")
    raw = value[2:] if value[:2].lower() == "0x" else value
    return Web3.to_checksum_address("0x" + raw.lower())


def is_zero_address(value: Optional[str]) -> bool:
    if not value:
        return True
    return is_hex_address(value) and int(value[-40:], 16) == 0


def to_hash(value: Optional[str]) -> str:
    """Lower-case, 0x-prefixed, left-padded 32 byte hex."""
    if not value:
        return ZERO_HASH
    raw = value[2:] if value[:2].lower() == "0x" else value
    if len(raw) > 64:
        raise ValueError(f"Hash longer than 32 bytes: {value!r}")
    int(raw or "0", 16)
    return "0x" + raw.lower().rjust(64, "0")


def is_zero_hash(value: Optional[str]) -> bool:
    return to_hash(value) == ZERO_HASH


def compute_trade_hash(maker_order_hash: str, taker_order_hash: str) -> str:
    """keccak256(makerOrderHash ‖ takerOrderHash). Trade content is not hashed."""
    payload = bytes.fromhex(to_hash(maker_order_hash)[2:]) + bytes.fromhex(to_hash(taker_order_hash)[2:])
    return "0x" + Web3.keccak(payload).hex().removeprefix("0x")


def pair_key(base_token: str, quote_token: str) -> Tuple[str, str]:
    return to_address(base_token), to_address(quote_token)
