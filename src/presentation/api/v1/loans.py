"""Loan API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from src.application.dto import CreateLoanRequest, FundLoanRequest, RepayLoanRequest
from src.application.services import LoanService, RepaymentService
from src.core.dependencies import (
    get_current_profile,
    get_loan_service,
    get_repayment_service,
)
from src.domain.entities import LoanStatus, Profile
from src.presentation.schemas import (
    CreateLoanRequestSchema,
    ErrorResponseSchema,
    FundLoanRequestSchema,
    FundLoanResponseSchema,
    LoanMetricsRequestSchema,
    LoanMetricsSchema,
    LoanResponseSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
    RepayLoanRequestSchema,
    RepaymentResponseSchema,
    RiskRequestSchema,
    RiskResponseSchema,
)
from src.service.pricing import LoanParameters, rupees_to_paise

loans_router = APIRouter(
    prefix="/loans",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


@loans_router.post(
    "",
    response_model=LoanResponseSchema,
    status_code=201,
    summary="Create Loan Request",
    description="""
    Publish a loan request on the marketplace.

    Accepting the terms records a signed loan request agreement.
    """,
)
async def create_loan(
    request: CreateLoanRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> LoanResponseSchema:
    dto = CreateLoanRequest(
        borrower_id=profile.id,
        title=request.title,
        description=request.description,
        amount_paise=rupees_to_paise(request.amount),
        interest_rate=request.interest_rate,
        tenure_days=request.tenure_days,
        purpose=request.purpose,
        images=request.images,
        terms_accepted=request.terms_accepted,
    )
    response = await loan_service.create_loan(dto)
    return LoanResponseSchema.model_validate(response)


@loans_router.get(
    "",
    response_model=list[LoanResponseSchema],
    summary="List Loans",
    description="List loans, newest first, optionally filtered by status or borrower.",
)
async def list_loans(
    profile: Annotated[Profile, Depends(get_current_profile)],
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
    status: Annotated[
        Optional[LoanStatus],
        Query(description="Only loans in this status"),
    ] = None,
    borrower_id: Annotated[
        Optional[str],
        Query(max_length=255, description="Only loans of this borrower"),
    ] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[LoanResponseSchema]:
    loans = await loan_service.list_loans(
        status=status,
        borrower_id=borrower_id,
        limit=limit,
        offset=offset,
    )
    return [LoanResponseSchema.model_validate(loan) for loan in loans]


@loans_router.post(
    "/quote",
    response_model=QuoteResponseSchema,
    summary="Quote Interest Rate",
    description="""
    Price a prospective loan.

    Uses the AI risk assessment when available and the rule-based
    calculator otherwise. The response says which was used.
    """,
)
async def quote_interest_rate(
    request: QuoteRequestSchema,
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> QuoteResponseSchema:
    params = LoanParameters(
        amount=request.amount,
        tenure_days=request.tenure_days,
        purpose=request.purpose,
        urgency=request.urgency,
        medical_verified=request.medical_verified,
        borrower_credit_score=request.borrower_credit_score,
        borrower_repayment_history=request.borrower_repayment_history,
    )
    result = await loan_service.quote(params)
    return QuoteResponseSchema.model_validate(result)


@loans_router.post(
    "/metrics",
    response_model=LoanMetricsSchema,
    summary="Calculate Loan Metrics",
    description="Simple-interest repayment breakdown for a loan.",
)
async def calculate_loan_metrics(
    request: LoanMetricsRequestSchema,
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> LoanMetricsSchema:
    metrics = loan_service.loan_metrics(
        amount=request.amount,
        interest_rate=request.interest_rate,
        tenure_days=request.tenure_days,
    )
    return LoanMetricsSchema.model_validate(metrics)


@loans_router.post(
    "/risk",
    response_model=RiskResponseSchema,
    summary="Assess Loan Risk",
    description="Risk analysis of a prospective loan against the caller's track record.",
)
async def assess_risk(
    request: RiskRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> RiskResponseSchema:
    response = await loan_service.assess_risk(
        profile,
        amount=request.amount,
        purpose=request.purpose.value,
        interest_rate=request.interest_rate,
        tenure_days=request.tenure_days,
        description=request.description,
    )
    return RiskResponseSchema.model_validate(response)


@loans_router.get(
    "/{loan_id}",
    response_model=LoanResponseSchema,
    summary="Get Loan",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Loan not found"},
    },
)
async def get_loan(
    loan_id: str,
    profile: Annotated[Profile, Depends(get_current_profile)],
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> LoanResponseSchema:
    response = await loan_service.get_loan(loan_id)
    return LoanResponseSchema.model_validate(response)


@loans_router.post(
    "/{loan_id}/fund",
    response_model=FundLoanResponseSchema,
    summary="Fund Loan",
    description="""
    Lend from the caller's wallet to the borrower's wallet.

    The loan moves to funded once the full amount is raised.
    """,
    responses={
        402: {"model": ErrorResponseSchema, "description": "Insufficient funds"},
        404: {"model": ErrorResponseSchema, "description": "Loan not found"},
    },
)
async def fund_loan(
    loan_id: str,
    request: FundLoanRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> FundLoanResponseSchema:
    dto = FundLoanRequest(
        lender_id=profile.id,
        loan_id=loan_id,
        amount_paise=rupees_to_paise(request.amount),
    )
    response = await loan_service.fund_loan(dto)
    return FundLoanResponseSchema.model_validate(response)


@loans_router.post(
    "/{loan_id}/repay",
    response_model=RepaymentResponseSchema,
    summary="Repay Loan",
    description="""
    Repay a funded loan from the borrower's wallet.

    The platform fee is retained and the rest is split between lenders
    in proportion to what each funded.
    """,
    responses={
        402: {"model": ErrorResponseSchema, "description": "Insufficient funds"},
        404: {"model": ErrorResponseSchema, "description": "Loan or wallet not found"},
    },
)
async def repay_loan(
    loan_id: str,
    request: RepayLoanRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    repayment_service: Annotated[RepaymentService, Depends(get_repayment_service)],
) -> RepaymentResponseSchema:
    amount_paise = (
        rupees_to_paise(request.repayment_amount)
        if request.repayment_amount is not None
        else None
    )
    dto = RepayLoanRequest(
        borrower_id=profile.id,
        loan_id=loan_id,
        repayment_amount_paise=amount_paise,
    )
    response = await repayment_service.repay_loan(dto)
    return RepaymentResponseSchema.model_validate(response)
