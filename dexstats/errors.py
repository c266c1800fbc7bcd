class DexStatsError(Exception):
    """Base class for everything this service raises on purpose."""


class ValidationError(DexStatsError):
    """Bad caller input; surfaced as a 4xx before the store is touched."""


class InvalidAddressError(ValidationError):
    pass


class StoreError(DexStatsError):
    """A store read/write failed; surfaced as a 5xx."""


class RelayerSourceError(DexStatsError):
    """The on-chain snapshot could not be fetched. Retryable."""


class MissingTokenError(DexStatsError):
    """A pair references a token that is not in the snapshot's token map."""

    def __init__(self, pair_key, token: str):
        super().__init__(f"pair {pair_key[0]}/{pair_key[1]} references unknown token {token}")
        self.pair_key = pair_key
        self.token = token


class NotFoundError(DexStatsError):
    """A keyed lookup matched nothing; surfaced as a 404."""


class ConfigError(DexStatsError):
    """The process was started with settings it cannot run on."""
