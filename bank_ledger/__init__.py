"""
Bank Ledger

An in-memory ledger of accounts persisted as rotating, numbered snapshot
files, with validation and fallback to older snapshots on load.
"""

__version__ = "1.0.0"
