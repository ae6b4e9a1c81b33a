"""
Rule-based loan risk assessment.

Used when the AI model can't be reached. Scores run 0-100 where higher
means safer, matching the AI assessment scale.
"""

from typing import List

from src.domain.entities import LoanRiskInput, RiskAssessment, RiskLevel
from .settings import PricingSettings, pricing_settings


def assess_risk_with_rules(
    loan: LoanRiskInput,
    settings: PricingSettings = pricing_settings,
) -> RiskAssessment:
    """
    Score a loan request from borrower verification, amount, rate and history.

    Args:
        loan: Loan and borrower facts
        settings: Pricing settings (uses defaults if not provided)

    Returns:
        Risk assessment with recommendations and concerns
    """
    score = settings.risk_base_score
    recommendations: List[str] = []
    concerns: List[str] = []

    if loan.borrower_verified:
        score += 15
        recommendations.append("Borrower identity is verified")
    else:
        score -= 10
        concerns.append("Borrower identity is not verified")

    if loan.amount > 50000:
        score -= 15
        concerns.append("High loan amount")
    elif loan.amount < 5000:
        score += 10
        recommendations.append("Small loan amount limits exposure")

    if loan.interest_rate > 15:
        score -= 10
        concerns.append("High interest rate may strain repayment")
    elif loan.interest_rate < 5:
        score += 5

    if loan.successful_repayments > 0:
        score += 20
        recommendations.append("Borrower has a successful repayment history")
    else:
        concerns.append("No repayment history on the platform")

    score = max(0, min(100, score))

    if score >= settings.risk_low_threshold:
        level = RiskLevel.LOW
    elif score >= settings.risk_medium_threshold:
        level = RiskLevel.MEDIUM
    else:
        level = RiskLevel.HIGH

    return RiskAssessment(
        risk_level=level,
        risk_score=score,
        recommendations=recommendations,
        concerns=concerns,
    )
