import os
from dotenv import load_dotenv

load_dotenv()

# ── store ────────────────────────────────────────────────────────────
# Postgres; amounts are uint256 and need NUMERIC(78, 0) to round-trip exactly
DATABASE_URL = os.getenv("DATABASE_URL")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))
DB_CONNECT_TIMEOUT_S = int(os.getenv("DB_CONNECT_TIMEOUT_S", "10"))
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "30000"))

# ── broker / locks ───────────────────────────────────────────────────
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)

SYNC_INTERVAL_MINUTES = int(os.getenv("SYNC_INTERVAL_MINUTES", "5"))
SYNC_LOCK_MS = int(os.getenv("SYNC_LOCK_MS", str(5 * 60 * 1000)))
SYNC_MAX_RETRIES = int(os.getenv("SYNC_MAX_RETRIES", "3"))
SYNC_RETRY_COUNTDOWN_S = int(os.getenv("SYNC_RETRY_COUNTDOWN_S", "30"))

# ── chain ────────────────────────────────────────────────────────────
RPC_URL = os.getenv("RPC_URL", "https://rpc.tomochain.com")
RPC_TIMEOUT_S = int(os.getenv("RPC_TIMEOUT_S", "10"))

RELAYER_REGISTRATION_ADDRESS = os.getenv(
    "RELAYER_REGISTRATION_ADDRESS", "0x16c63b79f9C8784168103C0b74E6A59EC2de4a02"
)
LENDING_REGISTRATION_ADDRESS = os.getenv(
    "LENDING_REGISTRATION_ADDRESS", "0x7d761afd7ff65a79e4173897594a194e3c506e57"
)
# fallback relayer for endpoints that need one and got none
EXCHANGE_ADDRESS = os.getenv("EXCHANGE_ADDRESS", "0x0000000000000000000000000000000000000000")

NATIVE_TOKEN_ADDRESS = os.getenv("NATIVE_TOKEN_ADDRESS", "0x0000000000000000000000000000000000000001")
NATIVE_TOKEN_SYMBOL = os.getenv("NATIVE_TOKEN_SYMBOL", "TOMO")
NATIVE_TOKEN_DECIMALS = 18

# addresses flagged as automated traders, comma separated
BOT_ADDRESSES = [a.strip() for a in os.getenv("BOT_ADDRESSES", "").split(",") if a.strip()]

DEFAULT_TOP = 10
DEFAULT_BASE_DECIMALS = 18

RELAYER_REGISTRATION_ABI = [
    { "name": "RelayerCount", "outputs": [ { "type": "uint256" } ],
      "inputs": [], "stateMutability": "view", "type": "function"},
    { "name": "RELAYER_COINBASES", "outputs": [ { "type": "address" } ],
      "inputs": [ { "name": "", "type": "uint256" } ], "stateMutability": "view", "type": "function"},
    { "name": "RESIGN_REQUESTS", "outputs": [ { "type": "uint256" } ],
      "inputs": [ { "name": "", "type": "address" } ], "stateMutability": "view", "type": "function"},
    { "name": "getRelayerByCoinbase",
      "outputs": [
          { "name": "index", "type": "uint256" },
          { "name": "owner", "type": "address" },
          { "name": "deposit", "type": "uint256" },
          { "name": "tradeFee", "type": "uint16" },
          { "name": "fromTokens", "type": "address[]" },
          { "name": "toTokens", "type": "address[]" },
      ],
      "inputs": [ { "name": "coinbase", "type": "address" } ],
      "stateMutability": "view", "type": "function"},
]

LENDING_REGISTRATION_ABI = [
    { "name": "getLendingRelayerByCoinbase",
      "outputs": [
          { "name": "tradeFee", "type": "uint16" },
          { "name": "baseTokens", "type": "address[]" },
          { "name": "terms", "type": "uint256[]" },
          { "name": "collaterals", "type": "address[]" },
      ],
      "inputs": [ { "name": "coinbase", "type": "address" } ],
      "stateMutability": "view", "type": "function"},
]

ERC20_META_ABI = [
    { "name": "decimals", "outputs": [ { "type": "uint8" } ],
      "inputs": [], "stateMutability": "view", "type": "function"},
    { "name": "symbol", "outputs": [ { "type": "string" } ],
      "inputs": [], "stateMutability": "view", "type": "function"},
]
