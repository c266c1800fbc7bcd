import logging


class ShortNameFilter(logging.Filter):
    """Adds `shortname`: the last two dotted parts of the logger name
    (dexstats.services.trade_service -> services-trade_service)."""

    def filter(self, record):
        path = record.name.split(".")
        record.shortname = "-".join(path[-2:])
        return True
