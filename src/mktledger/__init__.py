"""mktledger — marketplace ledger with a bounded circulating reserve."""

__version__ = "0.1.0"
