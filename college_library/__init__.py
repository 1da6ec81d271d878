"""College library catalog and checkout ledger service."""

__version__ = "1.0.0"
