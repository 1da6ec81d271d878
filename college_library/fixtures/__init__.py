"""Sample catalog and ledger data."""
