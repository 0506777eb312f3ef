"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts in the hall's single currency (LKR)
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from shared.domain.base import ValueObject

DEFAULT_CURRENCY = 'LKR'
SUPPORTED_CURRENCIES = ('LKR',)

CENT = Decimal('0.01')


def to_decimal(value) -> Decimal:
    """Coerce ints, floats and strings to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        object.__setattr__(self, 'amount', to_decimal(self.amount))
        # Validation
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        return Money(self.amount - other.amount, self.currency)

    def __str__(self):
        whole = self.amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        return f"{self.currency} {whole:,.0f}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"
