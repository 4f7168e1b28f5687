"""
Survey Ledger - indexed survey records over a key/value ledger

Stores survey responses under caller-supplied identifiers and keeps a
secondary index of every live identifier in a single ledger entry.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
