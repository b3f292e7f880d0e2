"""Billing calculator for invoice totals.

This module converts grouped durations into invoice lines:
- Hours per group from the exact number of seconds
- Line amounts floored to whole currency units, per line
- Subtotal, tax (also floored) and grand total

Rounding always goes down and is applied to every line before summation, so
an invoice never bills a fraction of a unit that no single line earned.
Rates are resolved by the caller; the calculator never guesses one.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, localcontext
from typing import Dict, List, Mapping, Sequence, Union

from timebill.errors import MissingRateError
from timebill.models.aggregates import AggregateGroup

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = Decimal("3600")

Number = Union[Decimal, int, float, str]


@dataclass
class InvoiceLine:
    """One billed group.

    Attributes:
        group_id: Identifier of the billed group
        label: Group label, as shown in summaries
        hours: Hours worked, rounded to 2 decimals for display
        rate: Hourly rate applied
        amount: floor(exact hours × rate) in whole currency units

    Example:
        >>> line = InvoiceLine(
        ...     group_id="P1",
        ...     label="Website",
        ...     hours=Decimal("2.50"),
        ...     rate=Decimal("3000"),
        ...     amount=Decimal("7500"),
        ... )
        >>> line.amount
        Decimal('7500')
    """

    group_id: str
    label: str
    hours: Decimal
    rate: Decimal
    amount: Decimal

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "label": self.label,
            "hours": str(self.hours),
            "rate": str(self.rate),
            "amount": str(self.amount),
        }


@dataclass
class Invoice:
    """Invoice totals.

    Attributes:
        lines: Invoice lines in the same order as the grouped summary
        subtotal: Sum of line amounts
        tax: floor(subtotal × tax rate)
        total: subtotal + tax
    """

    lines: List[InvoiceLine]
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
        }


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal without binary float artifacts.

    Raises:
        ValueError: If the value cannot be converted or is not finite
    """
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value))
        except ArithmeticError as e:
            raise ValueError(f"Cannot convert {value!r} to Decimal: {e}")
    if not d.is_finite():
        raise ValueError(f"Expected a finite number, got {value!r}")
    return d


def _exact_precision(a: Decimal, b: Decimal) -> int:
    """Digits needed to multiply two finite Decimals and floor the product."""
    _, a_digits, a_exponent = a.as_tuple()
    _, b_digits, b_exponent = b.as_tuple()
    return (
        len(a_digits) + max(a_exponent, 0) + len(b_digits) + max(b_exponent, 0) + 2
    )


def floor_amount(total_seconds: int, rate: Decimal) -> Decimal:
    """Calculate floor(total_seconds / 3600 × rate) exactly.

    Multiplying before the integer division keeps the calculation exact for
    durations that do not divide into whole hours. The context precision is
    raised to hold every digit of the product and the quotient.

    Example:
        >>> floor_amount(9000, Decimal("3000"))  # 2.5 h
        Decimal('7500')
        >>> floor_amount(1200, Decimal("100"))  # 1/3 h
        Decimal('33')
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _exact_precision(Decimal(total_seconds), rate))
        return (Decimal(total_seconds) * rate) // SECONDS_PER_HOUR


def calculate_line(group: AggregateGroup, rate: Number) -> InvoiceLine:
    """Build the invoice line for one group.

    Raises:
        ValueError: If the rate is negative
    """
    rate = to_decimal(rate)
    if rate < 0:
        raise ValueError(f"Rate for group '{group.id}' must not be negative: {rate}")

    hours = (Decimal(group.total_seconds) / SECONDS_PER_HOUR).quantize(Decimal("0.01"))
    return InvoiceLine(
        group_id=group.id,
        label=group.label,
        hours=hours,
        rate=rate,
        amount=floor_amount(group.total_seconds, rate),
    )


def find_missing_rates(
    groups: Sequence[AggregateGroup], rates_by_group: Mapping[str, Number]
) -> List[str]:
    """List the ids of groups without a configured rate, in group order."""
    return [group.id for group in groups if group.id not in rates_by_group]


def compute_invoice(
    groups: Sequence[AggregateGroup],
    rates_by_group: Mapping[str, Number],
    tax_rate: Number,
) -> Invoice:
    """Compute invoice lines and totals for grouped durations.

    Args:
        groups: Grouped durations, typically the output of ``group_entries``
        rates_by_group: Hourly rate per group id
        tax_rate: Tax rate as a fraction (e.g. 0.10 for 10%)

    Returns:
        Invoice with lines in the order of ``groups``

    Raises:
        MissingRateError: If any group has no rate
        ValueError: If a rate or the tax rate is negative

    Example:
        >>> group = AggregateGroup("P1", "Website", 9000, 100.0, "#3b82f6")
        >>> invoice = compute_invoice([group], {"P1": 3000}, Decimal("0.10"))
        >>> (invoice.subtotal, invoice.tax, invoice.total)
        (Decimal('7500'), Decimal('750'), Decimal('8250'))
    """
    tax_rate = to_decimal(tax_rate)
    if tax_rate < 0:
        raise ValueError(f"Tax rate must not be negative: {tax_rate}")

    missing = find_missing_rates(groups, rates_by_group)
    if missing:
        logger.warning(f"Missing billing rates for groups: {', '.join(missing)}")
        raise MissingRateError(missing[0])

    lines = [calculate_line(group, rates_by_group[group.id]) for group in groups]

    # Line amounts are integral, so summing them as ints is exact
    subtotal = Decimal(sum(int(line.amount) for line in lines))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _exact_precision(subtotal, tax_rate))
        tax = (subtotal * tax_rate).to_integral_value(rounding=ROUND_FLOOR)
    total = Decimal(int(subtotal) + int(tax))

    logger.info(
        f"Computed invoice with {len(lines)} lines: subtotal={subtotal}, "
        f"tax={tax}, total={total}"
    )

    return Invoice(lines=lines, subtotal=subtotal, tax=tax, total=total)


def rates_from_mapping(raw: Mapping[str, Number]) -> Dict[str, Decimal]:
    """Normalize a raw rate table (e.g. parsed JSON) to Decimal values."""
    return {str(group_id): to_decimal(rate) for group_id, rate in raw.items()}
