"""
Loan Pricing Module for the Vibe lending marketplace
"""

from .models import InterestRateResult, LoanMetrics, LoanParameters
from .settings import PricingSettings, pricing_settings
from .interest_rate import (
    calculate_interest_rate_from_risk,
    calculate_interest_rate_with_rules,
    clamp_rate,
)
from .loan_metrics import (
    amount_due_paise,
    calculate_loan_metrics,
    paise_to_rupees,
    platform_fee_paise,
    rupees_to_paise,
    simple_interest_paise,
)
from .risk import assess_risk_with_rules

__all__ = [
    # Settings
    "PricingSettings",
    "pricing_settings",
    # Models
    "InterestRateResult",
    "LoanMetrics",
    "LoanParameters",
    # Interest rate
    "calculate_interest_rate_from_risk",
    "calculate_interest_rate_with_rules",
    "clamp_rate",
    # Metrics
    "amount_due_paise",
    "calculate_loan_metrics",
    "paise_to_rupees",
    "platform_fee_paise",
    "rupees_to_paise",
    "simple_interest_paise",
    # Risk
    "assess_risk_with_rules",
]
