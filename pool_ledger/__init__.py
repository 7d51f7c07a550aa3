"""Participant-balance pool ledger with pro-rata profit distribution."""

__version__ = "1.0.0"
