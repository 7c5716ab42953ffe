"""Parsing of resource quantities such as ``200m``, ``100M`` or ``1Gi``."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from fractions import Fraction

__all__ = ["QuantityError", "Quantity", "parse_quantity"]

_SUFFIXES: dict[str, Fraction] = {
    "": Fraction(1),
    "n": Fraction(1, 10**9),
    "u": Fraction(1, 10**6),
    "m": Fraction(1, 10**3),
    "k": Fraction(10**3),
    "M": Fraction(10**6),
    "G": Fraction(10**9),
    "T": Fraction(10**12),
    "P": Fraction(10**15),
    "E": Fraction(10**18),
    "Ki": Fraction(2**10),
    "Mi": Fraction(2**20),
    "Gi": Fraction(2**30),
    "Ti": Fraction(2**40),
    "Pi": Fraction(2**50),
    "Ei": Fraction(2**60),
}

_NUMBER = re.compile(r"([+-]?)(\d+\.?\d*|\.\d+)(.*)", re.DOTALL)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)")


class QuantityError(ValueError):
    """Raised when a quantity string cannot be parsed."""


def _round_away_from_zero(amount: Fraction) -> int:
    return math.ceil(amount) if amount >= 0 else math.floor(amount)


@dataclass(frozen=True)
class Quantity:
    """An exact resource amount."""

    amount: Fraction

    def value(self) -> int:
        """The amount rounded up, away from zero, to a whole number."""
        return _round_away_from_zero(self.amount)

    def milli_value(self) -> int:
        """The amount in thousandths, rounded up away from zero."""
        return _round_away_from_zero(self.amount * 1000)


def _multiplier(suffix: str, text: str) -> Fraction:
    if suffix in _SUFFIXES:
        return _SUFFIXES[suffix]
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent is None:
        raise QuantityError(f"unable to parse quantity's suffix: {text!r}")
    return Fraction(10) ** int(exponent.group(1))


def parse_quantity(text: str) -> Quantity:
    """Parse a quantity string, raising QuantityError if it is malformed."""
    if not text:
        raise QuantityError("quantities must match the regular expression, got an empty string")
    match = _NUMBER.fullmatch(text)
    if match is None:
        raise QuantityError(f"quantities must match the regular expression: {text!r}")
    sign, number, suffix = match.groups()
    amount = Fraction(number) * _multiplier(suffix, text)
    if sign == "-":
        amount = -amount
    return Quantity(amount)