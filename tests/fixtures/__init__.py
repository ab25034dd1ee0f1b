"""Shared testing helpers for the quiz_runner test suite."""

from .banks import BankWriter, make_bank  # noqa: F401

__all__ = [
    "BankWriter",
    "make_bank",
]
