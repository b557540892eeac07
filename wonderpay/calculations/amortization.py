"""
Loan Amortization Calculations

Prices a fixed-rate term loan for the Capital dashboard: monthly payment,
total interest, total repayment and the full amortization schedule.
"""

import logging
import math
import re
from dataclasses import dataclass, field, asdict
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

# Fallback annual nominal rate when the caller does not quote one
BASE_INTEREST_RATE = 0.065

_CENTS = Decimal("0.01")

# Enough digits to quantize any finite float to cents
_ROUNDING_CONTEXT = Context(prec=400)

# Plain decimal or exponent notation, no underscores or inf/nan spellings
_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class InvalidArgument(ValueError):
    """Raised when a loan input cannot be priced."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field = field_name
        self.message = message


@dataclass
class AmortizationScheduleEntry:
    """One monthly payment in an amortization schedule."""

    payment_number: int
    payment_amount: float
    principal_amount: float
    interest_amount: float
    remaining_balance: float


@dataclass
class LoanCalculationResult:
    """Aggregate loan terms plus the per-period schedule."""

    monthly_payment: float
    total_interest: float
    total_repayment: float
    interest_rate: float
    amortization_schedule: List[AmortizationScheduleEntry] = field(
        default_factory=list
    )

    def to_dict(self) -> dict:
        return asdict(self)


def round_currency(value: float) -> float:
    """
    Round a money amount to cents, half-up on its exact binary value.

    Matches JavaScript's Number.toFixed(2), so 1.005 rounds to 1.0 because
    its binary value sits just below the half.
    """
    cents = Decimal(value).quantize(
        _CENTS, rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT
    )
    # Adding 0.0 turns -0.0 into 0.0
    return float(cents) + 0.0


def _to_float(value: Any) -> Optional[float]:
    """Parse a wire value (number or numeric string) to a float, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not _NUMBER_RE.fullmatch(value):
            return None
    elif not isinstance(value, (int, float)):
        return None

    try:
        return float(value)
    except OverflowError:
        return None


def coerce_loan_amount(value: Any) -> float:
    """Validate and convert a loan amount to a positive finite float."""
    amount = _to_float(value)
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise InvalidArgument("loan_amount", "Loan amount must be a positive number")
    return amount


def coerce_term_months(value: Any) -> int:
    """Validate and convert a term to a positive whole number of months."""
    months = _to_float(value)
    if (
        months is None
        or not math.isfinite(months)
        or months != int(months)
        or months <= 0
    ):
        raise InvalidArgument("term_months", "Term months must be a positive integer")
    return int(months)


def resolve_interest_rate(
    value: Any, base_rate: float = BASE_INTEREST_RATE
) -> float:
    """
    Resolve the annual rate to price with.

    Unparseable or non-finite values fall back to the base rate. Zero and
    negative rates are priced as given, down to -100% a month.
    """
    rate = _to_float(value)
    if rate is None or not math.isfinite(rate):
        return base_rate
    if rate / 12 <= -1:
        raise InvalidArgument(
            "interest_rate", "Interest rate must be above -1200% a year"
        )
    return rate


def calculate_monthly_payment(
    loan_amount: float, monthly_rate: float, term_months: int
) -> float:
    """
    Fixed payment that fully amortizes the loan (annuity formula).

    Args:
        loan_amount: Principal borrowed
        monthly_rate: Periodic rate (annual nominal rate / 12)
        term_months: Number of monthly payments

    Returns:
        Unrounded monthly payment
    """
    if monthly_rate == 0:
        return loan_amount / term_months

    # (1 + r)^n - 1 without cancellation for tiny r
    growth_minus_one = math.expm1(term_months * math.log1p(monthly_rate))
    if growth_minus_one == 0:
        return loan_amount / term_months

    growth = growth_minus_one + 1
    return loan_amount * monthly_rate * growth / growth_minus_one


def build_schedule(
    loan_amount: float,
    monthly_rate: float,
    monthly_payment: float,
    term_months: int,
) -> List[AmortizationScheduleEntry]:
    """Build the per-period schedule, rounding only the reported values."""
    schedule = []
    remaining_balance = loan_amount

    for payment_number in range(1, term_months + 1):
        interest_amount = remaining_balance * monthly_rate
        principal_amount = monthly_payment - interest_amount
        remaining_balance -= principal_amount

        # Last payment absorbs floating-point drift
        if payment_number == term_months:
            reported_balance = 0.0
        else:
            reported_balance = max(0.0, remaining_balance)

        schedule.append(
            AmortizationScheduleEntry(
                payment_number=payment_number,
                payment_amount=round_currency(monthly_payment),
                principal_amount=round_currency(principal_amount),
                interest_amount=round_currency(interest_amount),
                remaining_balance=round_currency(reported_balance),
            )
        )

    return schedule


def calculate(
    loan_amount: Any,
    term_months: Any,
    interest_rate: Any = None,
    base_rate: float = BASE_INTEREST_RATE,
) -> LoanCalculationResult:
    """
    Calculate loan terms and the full amortization schedule.

    Args:
        loan_amount: Principal, as a number or numeric string
        term_months: Term in whole months, as a number or numeric string
        interest_rate: Annual nominal rate as decimal (e.g., 0.065); optional
        base_rate: Rate used when interest_rate is omitted or unparseable

    Returns:
        LoanCalculationResult with money fields rounded to cents

    Raises:
        InvalidArgument: If an input fails validation, or the loan is too
            large for its payment to be represented. No schedule is built.
    """
    amount = coerce_loan_amount(loan_amount)
    months = coerce_term_months(term_months)
    rate = resolve_interest_rate(interest_rate, base_rate)

    monthly_rate = rate / 12
    monthly_payment = calculate_monthly_payment(amount, monthly_rate, months)
    total_repayment = monthly_payment * months
    total_interest = total_repayment - amount

    if not (math.isfinite(monthly_payment) and math.isfinite(total_repayment)):
        raise InvalidArgument("loan_amount", "Loan amount is too large to price")

    logger.debug(
        f"Pricing loan: amount={amount} term={months} rate={rate} "
        f"payment={monthly_payment:.4f}"
    )

    return LoanCalculationResult(
        monthly_payment=round_currency(monthly_payment),
        total_interest=round_currency(total_interest),
        total_repayment=round_currency(total_repayment),
        interest_rate=rate,
        amortization_schedule=build_schedule(
            amount, monthly_rate, monthly_payment, months
        ),
    )
