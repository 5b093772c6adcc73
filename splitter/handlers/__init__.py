"""Handlers package."""

from splitter.handlers import (
    start,
    auth,
    expense,
    repayment,
    balance
)

__all__ = [
    "start",
    "auth",
    "expense",
    "repayment",
    "balance"
]
