"""tripsplit - shared expense ledger with multi-currency settlement."""

__version__ = "1.0.0"
