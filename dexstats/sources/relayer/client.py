from typing import Dict, Optional
from web3 import Web3, HTTPProvider
import backoff
import logging
from dexstats.config import settings
from dexstats.errors import RelayerSourceError

log = logging.getLogger(__name__)

# one client per RPC url for the life of the process
_web3_clients: Dict[str, Web3] = {}


@backoff.on_exception(backoff.expo, ConnectionError, max_tries=3, jitter=None)
def _connect(rpc_url: str, timeout: int) -> Web3:
    log.info(f"Connecting to RPC: {rpc_url}")
    w3 = Web3(HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
    if not w3.is_connected():
        raise ConnectionError(f"Failed to connect to RPC: {rpc_url}")
    return w3


def get_web3_client(rpc_url: Optional[str] = None, timeout: Optional[int] = None) -> Web3:
    """Every call made through the client is bounded by `timeout` seconds.
    Raises RelayerSourceError once the connection attempts are used up."""
    rpc_url = rpc_url or settings.RPC_URL
    if rpc_url not in _web3_clients:
        try:
            _web3_clients[rpc_url] = _connect(rpc_url, timeout or settings.RPC_TIMEOUT_S)
        except ConnectionError as e:
            raise RelayerSourceError(str(e)) from e
        log.info(f"Connected to {rpc_url} ✅")
    return _web3_clients[rpc_url]
