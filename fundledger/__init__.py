"""
Fund Ledger - Source Package

A personal three-fund ledger: every income is split across a FREEDOM
fund (never spent), a DREAM fund (spent only on named goals) and a
PLAY fund (spent freely).

DESIGN PRINCIPLES:
1. Balances never disagree with the transaction log
2. Nothing is written without an explicit confirmation
3. Rejected operations leave the ledger untouched
4. Every step is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Fund Ledger Team"
