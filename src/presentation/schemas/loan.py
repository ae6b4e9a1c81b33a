"""Loan-related Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import LoanPurpose, Urgency


class CreateLoanRequestSchema(BaseModel):
    """Schema for POST /v1/loans request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Semester fees for final year",
                    "description": (
                        "I need help covering the remaining tuition for my final "
                        "semester of engineering."
                    ),
                    "amount": 15000,
                    "interest_rate": 8.5,
                    "tenure_days": 90,
                    "purpose": "education",
                    "terms_accepted": True,
                }
            ]
        }
    )

    title: str = Field(..., description="At least 10 characters")
    description: str = Field(..., description="At least 50 characters")
    amount: float = Field(..., description="Requested amount in rupees (₹100 - ₹100,000)")
    interest_rate: float = Field(..., description="Annual interest rate in percent (0-20)")
    tenure_days: int = Field(..., description="Loan term in days (7-365)")
    purpose: LoanPurpose
    images: list[str] = Field(default_factory=list, description="Image URLs")
    terms_accepted: bool = Field(False, description="Borrower accepted the loan terms")


class FundingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lender_id: str
    lender_name: Optional[str] = None
    amount: float = Field(..., description="Funded amount in rupees")
    funded_at: str


class LoanResponseSchema(BaseModel):
    """Schema for loan responses. Amounts are in rupees."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    borrower_id: str
    title: str
    description: str
    amount: float
    currency: str
    interest_rate: float
    tenure_days: int
    purpose: str
    status: str = Field(..., description="active, funded, completed, defaulted or cancelled")
    total_funded: float
    funding_progress: float = Field(..., description="Funded share in percent")
    images: list[str]
    medical_verified: bool
    terms_accepted: bool
    fundings: list[FundingSchema]
    created_at: str


class FundLoanRequestSchema(BaseModel):
    """Schema for POST /v1/loans/{loan_id}/fund request body."""

    amount: float = Field(..., description="Amount to lend in rupees", examples=[5000])


class FundLoanResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    loan: LoanResponseSchema
    funding_id: str
    amount: float
    lender_balance: float = Field(..., description="Lender's wallet balance after funding")


class QuoteRequestSchema(BaseModel):
    """Schema for POST /v1/loans/quote request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "amount": 10000,
                    "tenure_days": 90,
                    "purpose": "education",
                    "urgency": "medium",
                }
            ]
        }
    )

    amount: float = Field(..., gt=0, description="Principal in rupees")
    tenure_days: int = Field(..., gt=0, description="Loan term in days")
    purpose: LoanPurpose
    urgency: Urgency = Urgency.MEDIUM
    medical_verified: bool = False
    borrower_credit_score: int = Field(750, ge=0, le=900)
    borrower_repayment_history: int = Field(0, ge=0)


class QuoteResponseSchema(BaseModel):
    """A priced quote. Money fields are in rupees."""

    model_config = ConfigDict(from_attributes=True)

    interest_rate: float = Field(..., description="Annual rate in percent", examples=[7.5])
    platform_fee_percentage: float = Field(..., examples=[4.5])
    platform_fee: float
    interest_amount: float
    repayment_amount: float = Field(..., description="Principal plus interest")
    explanation: str
    factors: list[str]
    method: str = Field(..., description="ai or rules")


class LoanMetricsRequestSchema(BaseModel):
    """Schema for POST /v1/loans/metrics request body."""

    amount: float = Field(..., gt=0, description="Principal in rupees")
    interest_rate: float = Field(..., ge=0, description="Annual rate in percent")
    tenure_days: int = Field(..., gt=0)


class LoanMetricsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    principal: float
    interest: float
    total_repayment: float
    daily_repayment: float
    effective_apr: str = Field(..., examples=["8.50"])
    platform_fee_percentage: float
    platform_fee: float


class RiskRequestSchema(BaseModel):
    """Schema for POST /v1/loans/risk request body."""

    amount: float = Field(..., gt=0, description="Principal in rupees")
    purpose: LoanPurpose
    interest_rate: float = Field(..., ge=0)
    tenure_days: int = Field(..., gt=0)
    description: str = ""


class RiskResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    risk_level: str = Field(..., description="low, medium or high")
    risk_score: int = Field(..., ge=0, le=100, description="Higher is safer")
    recommendations: list[str]
    concerns: list[str]
    method: str = Field(..., description="ai or rules")


class RepayLoanRequestSchema(BaseModel):
    """Schema for POST /v1/loans/{loan_id}/repay request body."""

    repayment_amount: Optional[float] = Field(
        None,
        description="Amount in rupees; defaults to principal plus interest",
    )


class LenderPaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lender_id: str
    lender_name: Optional[str] = None
    lender_email: Optional[str] = None
    amount: float


class RepaymentResponseSchema(BaseModel):
    """Schema for repayment responses. Amounts are in rupees."""

    model_config = ConfigDict(from_attributes=True)

    loan_id: str
    repayment_amount: float
    platform_fee: float
    platform_fee_percentage: float
    interest_amount: float
    net_amount_to_lender: float
    new_borrower_balance: float
    lender_payments: list[LenderPaymentSchema]
    closure_document_created: bool
