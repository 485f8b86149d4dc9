"""
Functional modules for the 1Money client
"""

from .transactions import TransactionsModule
from .tokens import TokensModule
from .accounts import AccountsModule
from .states import StatesModule

__all__ = [
    "TransactionsModule",
    "TokensModule",
    "AccountsModule",
    "StatesModule",
]
