"""Infrastructure layer: ledger file persistence."""
