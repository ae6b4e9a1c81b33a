"""
Interest-rate calculator.

Two ways to price a loan:

1. From an AI risk assessment: the risk level picks a rate band, the risk
   score picks a point inside it, and purpose/tenure/amount adjustments are
   applied on top.
2. From fixed rules: a base rate by purpose plus amount, tenure and urgency
   adjustments. Used whenever the AI path is unavailable.

Both clamp the rate to [min_rate, max_rate], charge simple interest over the
tenure, and quote a platform fee as a fixed share of principal.
"""

from typing import Dict, List, Tuple

from src.domain.entities import LoanPurpose, RiskAssessment, RiskLevel, Urgency
from .models import InterestRateResult, LoanParameters
from .settings import PricingSettings, pricing_settings

# Base annual rate and the factor shown to the borrower
PURPOSE_BASE_RATES: Dict[LoanPurpose, Tuple[float, str]] = {
    LoanPurpose.EDUCATION: (6.0, "Education purpose qualifies for favorable interest rate"),
    LoanPurpose.TEXTBOOKS: (7.0, "Educational materials purpose"),
    LoanPurpose.RENT: (9.0, "Housing/rent purpose"),
    LoanPurpose.EMERGENCY: (10.0, "Emergency purpose loan"),
    LoanPurpose.ASSISTIVE_DEVICES: (
        5.5,
        "Assistive devices purpose qualifies for lower interest rate",
    ),
    LoanPurpose.OTHER: (12.0, "General purpose loan"),
}


def clamp_rate(rate: float, settings: PricingSettings = pricing_settings) -> float:
    """Bound a rate to the configured range and round to 2 decimals."""
    rate = max(settings.min_rate, min(settings.max_rate, rate))
    return round(rate, 2)


def calculate_interest_rate_with_rules(
    params: LoanParameters,
    settings: PricingSettings = pricing_settings,
) -> InterestRateResult:
    """
    Price a loan from fixed rules.

    Args:
        params: Loan parameters
        settings: Pricing settings (uses defaults if not provided)

    Returns:
        Quote with ``method="rules"``
    """
    factors: List[str] = []

    if params.purpose == LoanPurpose.MEDICAL:
        if params.medical_verified:
            rate = 5.0
            factors.append("Verified medical purpose qualifies for lower interest rate")
        else:
            rate = 8.0
            factors.append("Unverified medical purpose")
    else:
        rate, factor = PURPOSE_BASE_RATES[params.purpose]
        factors.append(factor)

    if params.amount < 2000:
        rate += 2
        factors.append("Small loan amount increases risk")
    elif params.amount < 5000:
        rate += 1
        factors.append("Moderate loan amount")
    elif params.amount > 20000:
        rate -= 0.5
        factors.append("Larger loan amount qualifies for slight rate reduction")

    if params.tenure_days < 30:
        rate += 1.5
        factors.append("Very short tenure increases rate")
    elif params.tenure_days < 60:
        rate += 0.5
        factors.append("Short tenure")
    elif params.tenure_days > 180:
        rate -= 0.5
        factors.append("Longer tenure qualifies for rate reduction")

    if params.urgency == Urgency.CRITICAL:
        rate -= 1
        factors.append("Critical urgency qualifies for rate reduction")
    elif params.urgency == Urgency.HIGH:
        rate -= 0.5
        factors.append("High urgency")

    rate = clamp_rate(rate, settings)
    explanation = (
        f"Based on standard rules, an interest rate of {rate}% has been calculated "
        f"for this {params.purpose.value} loan of ₹{_display_amount(params.amount)} for "
        f"{params.tenure_days} days. The platform fee is "
        f"{settings.platform_fee_percentage}% of the principal amount."
    )

    return _build_result(params, rate, explanation, factors, "rules", settings)


def calculate_interest_rate_from_risk(
    params: LoanParameters,
    assessment: RiskAssessment,
    settings: PricingSettings = pricing_settings,
) -> InterestRateResult:
    """
    Price a loan from an AI risk assessment.

    The band is chosen by risk level; a score of 100 lands on the bottom of
    the band and a score of 0 on the top.

    Args:
        params: Loan parameters
        assessment: AI risk assessment of the loan
        settings: Pricing settings (uses defaults if not provided)

    Returns:
        Quote with ``method="ai"``
    """
    band_low, band_high = _risk_band(assessment.risk_level, settings)
    score = max(0, min(100, assessment.risk_score))
    rate = band_low + (band_high - band_low) * (100 - score) / 100

    if params.purpose == LoanPurpose.MEDICAL and params.medical_verified:
        rate -= 2
    elif params.purpose == LoanPurpose.EDUCATION:
        rate -= 1
    elif params.purpose == LoanPurpose.EMERGENCY and params.urgency == Urgency.CRITICAL:
        rate -= 0.5

    if params.tenure_days <= 30:
        rate += 1
    elif params.tenure_days >= 180:
        rate -= 0.5

    if params.amount < 5000:
        rate += 1
    elif params.amount > 50000:
        rate -= 0.5

    rate = clamp_rate(rate, settings)
    explanation = (
        f"Based on the loan parameters and risk assessment, an interest rate of "
        f"{rate}% has been calculated. This considers the loan amount "
        f"(₹{_display_amount(params.amount)}), tenure ({params.tenure_days} days), purpose "
        f"({params.purpose.value}), and other risk factors. The platform fee is "
        f"{settings.platform_fee_percentage}% of the principal amount."
    )
    factors = [*assessment.recommendations, *assessment.concerns]

    return _build_result(params, rate, explanation, factors, "ai", settings)


def _display_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else f"{amount:.2f}"


def _risk_band(level: RiskLevel, settings: PricingSettings) -> Tuple[float, float]:
    if level == RiskLevel.LOW:
        return settings.low_risk_band
    if level == RiskLevel.MEDIUM:
        return settings.medium_risk_band
    return settings.high_risk_band


def _build_result(
    params: LoanParameters,
    rate: float,
    explanation: str,
    factors: List[str],
    method: str,
    settings: PricingSettings,
) -> InterestRateResult:
    principal = params.amount
    interest = principal * (rate / 100) * (params.tenure_days / 365)
    platform_fee = principal * (settings.platform_fee_percentage / 100)

    return InterestRateResult(
        interest_rate=rate,
        platform_fee_percentage=settings.platform_fee_percentage,
        platform_fee=round(platform_fee, 2),
        interest_amount=round(interest, 2),
        repayment_amount=round(principal + interest, 2),
        explanation=explanation,
        factors=factors,
        method=method,
    )
