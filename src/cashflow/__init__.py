"""cashflow: recurring payment ledger and balance projection CLI."""

__version__ = "0.1.0"
