"""
Amortization engine.

Pure calculations, no database access:
- EMI (Equated Monthly Installment) for a principal, annual rate and tenure
- Month-by-month schedule splitting each payment into interest and principal

All money values are ``Decimal`` rounded half-up to 2 places.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, DivisionByZero
from typing import Iterator, Tuple, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ScheduleEntry:
    month: int
    payment: Decimal
    principal_component: Decimal
    interest_component: Decimal
    balance: Decimal


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal through str so floats keep their printed value"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Number) -> Decimal:
    return to_decimal(annual_rate_percent) / 12 / 100


def compute_emi(principal: Number, annual_rate_percent: Number, months: int) -> Decimal:
    """
    Calculate the Equated Monthly Installment.

    Formula: EMI = P x r x (1 + r)^n / ((1 + r)^n - 1)
    where r = annual_rate_percent / 12 / 100 and n = months.

    Returns Decimal("0.00") when the inputs do not describe an amortizing
    loan (zero rate, non-positive principal or tenure, undefined result).
    Callers must treat 0 as invalid input, not as a schedule.
    """
    try:
        principal = to_decimal(principal)
        rate = monthly_rate(annual_rate_percent)
        months = int(months)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO

    if not principal.is_finite() or not rate.is_finite():
        return ZERO
    if rate <= 0 or principal <= 0 or months <= 0:
        return ZERO

    try:
        multiplier = (1 + rate) ** months
        emi = principal * rate * multiplier / (multiplier - 1)
    except (InvalidOperation, DivisionByZero):
        return ZERO

    if not emi.is_finite() or emi <= 0:
        return ZERO
    return round_money(emi)


def generate_schedule(
    principal: Number,
    annual_rate_percent: Number,
    months: int,
    emi: Number
) -> Iterator[ScheduleEntry]:
    """
    Yield the amortization schedule one month at a time.

    The running balance is carried unrounded; reported components are
    rounded and the reported balance never goes below zero. Stops early
    once the balance is paid down. Calling again with the same inputs
    yields the same sequence.
    """
    balance = to_decimal(principal)
    rate = monthly_rate(annual_rate_percent)
    payment = to_decimal(emi)

    for month in range(1, int(months) + 1):
        interest = balance * rate
        principal_component = payment - interest
        balance -= principal_component

        yield ScheduleEntry(
            month=month,
            payment=round_money(payment),
            principal_component=round_money(principal_component),
            interest_component=round_money(interest),
            balance=max(round_money(balance), ZERO),
        )

        if balance <= 0:
            break


def summarize(principal: Number, months: int, emi: Number) -> Tuple[Decimal, Decimal]:
    """Total repayment and total interest for a level-payment loan"""
    total_payment = round_money(to_decimal(emi) * int(months))
    total_interest = round_money(total_payment - to_decimal(principal))
    return total_payment, total_interest
