"""Custom exception hierarchy for the trade analytics engine."""


class TradeAnalyticsError(Exception):
    """Base exception for all trade analytics errors."""


# --- Configuration ---
class ConfigError(TradeAnalyticsError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(TradeAnalyticsError):
    """Malformed input at the library boundary."""


class InvalidTimestampError(DataError):
    """A timestamp string could not be parsed."""

    def __init__(self, value: object, reason: str = ""):
        self.value = value
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid timestamp {value!r}{detail}")


class InvalidTimeOfDayError(DataError):
    """A time-of-day filter value is not a zero-padded 24h ``HH:MM``."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid time of day {value!r}: expected zero-padded 24h HH:MM"
        )


# --- Catalog / store ---
class CatalogError(TradeAnalyticsError):
    """Trade store or catalog lookup failure."""


class UnknownTradeError(CatalogError):
    """No trade with the requested id exists in the store."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Unknown trade id: {trade_id}")


class DuplicateTradeError(CatalogError):
    """A trade with the same id is already stored."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Duplicate trade id: {trade_id}")
