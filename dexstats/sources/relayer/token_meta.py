from web3 import Web3
from functools import lru_cache
from dexstats.config.settings import ERC20_META_ABI, NATIVE_TOKEN_ADDRESS, NATIVE_TOKEN_SYMBOL, NATIVE_TOKEN_DECIMALS
from dexstats.sources.relayer.types import TokenInfo


@lru_cache(maxsize=None)
def get_token_meta(w3: Web3, token_addr: str) -> TokenInfo:
    # the native coin has no contract behind its placeholder address
    if token_addr.lower() == NATIVE_TOKEN_ADDRESS.lower():
        return TokenInfo(symbol=NATIVE_TOKEN_SYMBOL, decimals=NATIVE_TOKEN_DECIMALS)

    token = w3.eth.contract(address=token_addr, abi=ERC20_META_ABI)
    return TokenInfo(
        symbol=token.functions.symbol().call(),
        decimals=int(token.functions.decimals().call()),
    )
