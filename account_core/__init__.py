"""
Account Core

Account lifecycle and balance transactions for a set of users, with
sequential account numbers, per-account serialization and a transaction
record for every mutation attempt.
"""

__version__ = "1.0.0"
