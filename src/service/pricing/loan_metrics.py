"""
Loan arithmetic.

Rupee helpers back the public calculator; paise helpers back the wallet
ledger, where every amount is an integer number of paise.
"""

from decimal import ROUND_HALF_UP, Decimal

from .models import LoanMetrics
from .settings import PricingSettings, pricing_settings

DAYS_PER_YEAR = 365


def _round_money(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _round_paise(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_loan_metrics(
    amount: float,
    interest_rate: float,
    tenure_days: int,
    settings: PricingSettings = pricing_settings,
) -> LoanMetrics:
    """
    Simple-interest breakdown for a loan.

    Args:
        amount: Principal in rupees
        interest_rate: Annual rate as a percentage
        tenure_days: Loan term in days (must be positive)
        settings: Pricing settings (uses defaults if not provided)

    Returns:
        Interest, total, per-day repayment, effective APR and platform fee
    """
    if tenure_days <= 0:
        raise ValueError("tenure_days must be positive")
    if amount <= 0:
        raise ValueError("amount must be positive")

    interest = amount * (interest_rate / 100) * (tenure_days / DAYS_PER_YEAR)
    total = amount + interest
    effective_apr = (total / amount - 1) * (DAYS_PER_YEAR / tenure_days) * 100
    platform_fee = amount * settings.platform_fee_percentage / 100

    return LoanMetrics(
        principal=amount,
        interest=_round_money(interest),
        total_repayment=_round_money(total),
        daily_repayment=_round_money(total / tenure_days),
        effective_apr=f"{effective_apr:.2f}",
        platform_fee_percentage=settings.platform_fee_percentage,
        platform_fee=_round_money(platform_fee),
    )


def simple_interest_paise(principal_paise: int, interest_rate: float, tenure_days: int) -> int:
    """Simple interest on a principal, rounded half-up to whole paise."""
    value = (
        Decimal(principal_paise)
        * Decimal(str(interest_rate))
        * Decimal(tenure_days)
        / Decimal(100 * DAYS_PER_YEAR)
    )
    return _round_paise(value)


def platform_fee_paise(
    principal_paise: int,
    settings: PricingSettings = pricing_settings,
) -> int:
    """Platform fee on a principal, rounded half-up to whole paise."""
    value = Decimal(principal_paise) * Decimal(str(settings.platform_fee_percentage)) / 100
    return _round_paise(value)


def amount_due_paise(principal_paise: int, interest_rate: float, tenure_days: int) -> int:
    """Principal plus simple interest."""
    return principal_paise + simple_interest_paise(principal_paise, interest_rate, tenure_days)


def rupees_to_paise(amount: float) -> int:
    """Convert a rupee amount to whole paise, rounding half-up."""
    return _round_paise(Decimal(str(amount)) * 100)


def paise_to_rupees(amount_paise: int) -> float:
    return amount_paise / 100
