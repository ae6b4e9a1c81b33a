"""Loan service - posting, browsing, funding and pricing loan requests."""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

import structlog

from src.application.dto import (
    CreateLoanRequest,
    FundLoanRequest,
    FundLoanResponse,
    LoanResponse,
    RiskAssessmentResponse,
)
from src.core.metrics import record_funding, record_quote
from src.core.timeutils import to_utc_iso
from src.domain.entities import (
    AgreementStatus,
    AgreementType,
    DocumentType,
    LoanAgreement,
    LoanFunding,
    LoanPurpose,
    LoanRequest,
    LoanRiskInput,
    LoanStatus,
    Profile,
    ReferenceType,
    RiskAssessment,
)
from src.domain.exceptions import (
    AIServiceException,
    InsufficientFundsException,
    InvalidLoanRequestException,
    InvalidRequestException,
    LoanFundingException,
    LoanNotFoundException,
)
from src.domain.interfaces import (
    AgreementRepository,
    LoanRepository,
    ProfileRepository,
    VerificationRepository,
    WalletRepository,
)
from src.service.ai import AIAssistant
from src.service.pricing import (
    InterestRateResult,
    LoanMetrics,
    LoanParameters,
    PricingSettings,
    assess_risk_with_rules,
    calculate_interest_rate_from_risk,
    calculate_interest_rate_with_rules,
    calculate_loan_metrics,
    pricing_settings,
)

logger = structlog.get_logger(__name__)


def parse_loan_id(loan_id: str) -> UUID:
    """Parse a loan ID, treating malformed IDs as unknown loans."""
    try:
        return UUID(str(loan_id))
    except ValueError:
        raise LoanNotFoundException(str(loan_id))


class LoanService:
    """
    Application service for loan marketplace use cases.
    """

    def __init__(
        self,
        loan_repository: LoanRepository,
        wallet_repository: WalletRepository,
        profile_repository: ProfileRepository,
        agreement_repository: AgreementRepository,
        verification_repository: VerificationRepository,
        assistant: AIAssistant,
        currency: str = "INR",
        settings: PricingSettings = pricing_settings,
    ):
        self._loan_repo = loan_repository
        self._wallet_repo = wallet_repository
        self._profile_repo = profile_repository
        self._agreement_repo = agreement_repository
        self._verification_repo = verification_repository
        self._assistant = assistant
        self._currency = currency
        self._settings = settings

    async def create_loan(self, request: CreateLoanRequest) -> LoanResponse:
        """
        Post a new loan request, open for funding.

        Args:
            request: The loan details

        Returns:
            The created loan

        Raises:
            InvalidLoanRequestException: If request validation fails
        """
        errors = request.validate()
        if errors:
            raise InvalidLoanRequestException("; ".join(errors))

        medical_verified = False
        if request.purpose == LoanPurpose.MEDICAL:
            verifications = await self._verification_repo.list_for_user(request.borrower_id)
            medical_verified = any(
                v.document_type == DocumentType.MEDICAL_PRESCRIPTION for v in verifications
            )

        now = datetime.utcnow()
        loan = LoanRequest(
            borrower_id=request.borrower_id,
            title=request.title.strip(),
            description=request.description.strip(),
            amount_paise=request.amount_paise,
            interest_rate=request.interest_rate,
            tenure_days=request.tenure_days,
            purpose=request.purpose,
            currency=self._currency,
            images=list(request.images),
            medical_verified=medical_verified,
            terms_accepted=request.terms_accepted,
            terms_accepted_at=now if request.terms_accepted else None,
        )
        await self._loan_repo.save(loan)

        if request.terms_accepted:
            await self._agreement_repo.save(
                LoanAgreement(
                    loan_id=loan.id,
                    borrower_id=loan.borrower_id,
                    agreement_type=AgreementType.LOAN_REQUEST,
                    agreement_data={
                        "loan_id": str(loan.id),
                        "title": loan.title,
                        "amount": loan.amount_paise / 100,
                        "interest_rate": loan.interest_rate,
                        "tenure_days": loan.tenure_days,
                        "purpose": loan.purpose.value,
                        "terms_accepted_at": to_utc_iso(now),
                    },
                    status=AgreementStatus.SIGNED,
                    signed_at=now,
                )
            )

        logger.info(
            "loan_created",
            loan_id=str(loan.id),
            borrower_id=loan.borrower_id,
            amount_paise=loan.amount_paise,
            purpose=loan.purpose.value,
        )

        return LoanResponse.from_entity(loan)

    async def list_loans(
        self,
        status: Optional[LoanStatus] = None,
        borrower_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[LoanResponse]:
        loans = await self._loan_repo.list(
            status=status,
            borrower_id=borrower_id,
            limit=limit,
            offset=offset,
        )
        return [LoanResponse.from_entity(loan) for loan in loans]

    async def get_loan(self, loan_id: str) -> LoanResponse:
        """
        Raises:
            LoanNotFoundException: If loan not found
        """
        loan = await self._loan_repo.get_by_id(parse_loan_id(loan_id))
        if loan is None:
            raise LoanNotFoundException(loan_id)
        return LoanResponse.from_entity(loan)

    async def fund_loan(self, request: FundLoanRequest) -> FundLoanResponse:
        """
        Move money from the lender's wallet to the borrower's.

        Args:
            request: Lender, loan and amount in paise

        Returns:
            The updated loan and the lender's new balance

        Raises:
            LoanNotFoundException: If loan not found
            LoanFundingException: If the loan can't take this funding
            InsufficientFundsException: If the lender's wallet doesn't cover it
        """
        errors = request.validate()
        if errors:
            raise LoanFundingException("; ".join(errors))

        loan = await self._loan_repo.get_by_id(parse_loan_id(request.loan_id), for_update=True)
        if loan is None:
            raise LoanNotFoundException(request.loan_id)

        if loan.status != LoanStatus.ACTIVE:
            raise LoanFundingException("Loan is not open for funding")

        if loan.borrower_id == request.lender_id:
            raise LoanFundingException("You cannot fund your own loan")

        if request.amount_paise > loan.remaining_paise:
            raise LoanFundingException(
                f"Amount exceeds the remaining need of ₹{loan.remaining_paise / 100:.2f}"
            )

        lender_wallet = await self._wallet_repo.get(
            request.lender_id,
            self._currency,
            for_update=True,
        )
        if lender_wallet is None:
            raise InsufficientFundsException(
                required_paise=request.amount_paise,
                available_paise=0,
            )

        funding = LoanFunding(
            loan_id=loan.id,
            lender_id=request.lender_id,
            amount_paise=request.amount_paise,
        )
        debit = lender_wallet.debit(
            request.amount_paise,
            description=f"Loan funding - {loan.title}",
            reference_type=ReferenceType.LOAN_FUNDING,
            reference_id=str(loan.id),
            metadata={"loan_id": str(loan.id), "borrower_id": loan.borrower_id},
        )

        borrower_wallet = await self._wallet_repo.get_or_create(
            loan.borrower_id,
            self._currency,
            for_update=True,
        )
        credit = borrower_wallet.credit(
            request.amount_paise,
            description=f"Loan disbursement received - ₹{request.amount_paise / 100:.2f}",
            reference_type=ReferenceType.LOAN_DISBURSEMENT,
            reference_id=str(loan.id),
            metadata={
                "loan_id": str(loan.id),
                "lender_id": request.lender_id,
                "funding_id": str(funding.id),
            },
        )

        await self._wallet_repo.apply(lender_wallet, debit)
        await self._wallet_repo.apply(borrower_wallet, credit)
        await self._loan_repo.add_funding(funding)

        loan.add_funding(funding)
        await self._loan_repo.update(loan)

        await self._agreement_repo.save(
            LoanAgreement(
                loan_id=loan.id,
                borrower_id=loan.borrower_id,
                lender_id=request.lender_id,
                agreement_type=AgreementType.LENDING_PROOF,
                agreement_data={
                    "loan_id": str(loan.id),
                    "funding_id": str(funding.id),
                    "amount": request.amount_paise / 100,
                    "interest_rate": loan.interest_rate,
                    "tenure_days": loan.tenure_days,
                    "funded_at": to_utc_iso(funding.funded_at),
                },
            )
        )

        record_funding(loan.is_fully_funded)
        logger.info(
            "loan_funded",
            loan_id=str(loan.id),
            lender_id=request.lender_id,
            amount_paise=request.amount_paise,
            total_funded_paise=loan.total_funded_paise,
            status=loan.status.value,
        )

        return FundLoanResponse(
            loan=LoanResponse.from_entity(loan),
            funding_id=str(funding.id),
            amount=request.amount_paise / 100,
            lender_balance=lender_wallet.balance_rupees,
        )

    async def quote(self, params: LoanParameters) -> InterestRateResult:
        """
        Price a loan, preferring the AI risk assessment.

        The rule-based quote is returned whenever the AI isn't configured
        or its call fails.
        """
        rules_result = calculate_interest_rate_with_rules(params, self._settings)

        if not self._assistant.is_configured:
            record_quote(rules_result.method)
            return rules_result

        risk_input = LoanRiskInput(
            amount=params.amount,
            purpose=params.purpose.value,
            interest_rate=rules_result.interest_rate,
            tenure_days=params.tenure_days,
            description=(
                f"Urgency: {params.urgency.value}. "
                f"Medical need verified: {'yes' if params.medical_verified else 'no'}. "
                f"Credit score: {params.borrower_credit_score}."
            ),
            # Quotes are anonymous, so the identity check is unknown
            borrower_verified=False,
            successful_repayments=params.borrower_repayment_history,
        )

        try:
            assessment = await self._assistant.analyze_loan_risk(risk_input)
        except AIServiceException as e:
            logger.warning("ai_quote_failed_using_rules", error=e.message)
            record_quote(rules_result.method)
            return rules_result

        result = calculate_interest_rate_from_risk(params, assessment, self._settings)
        record_quote(result.method)
        return result

    def loan_metrics(
        self,
        amount: float,
        interest_rate: float,
        tenure_days: int,
    ) -> LoanMetrics:
        """
        Raises:
            InvalidRequestException: If amount or tenure isn't positive
        """
        try:
            return calculate_loan_metrics(amount, interest_rate, tenure_days, self._settings)
        except ValueError as e:
            raise InvalidRequestException(str(e))

    async def assess_risk(
        self,
        profile: Profile,
        amount: float,
        purpose: str,
        interest_rate: float,
        tenure_days: int,
        description: str = "",
    ) -> RiskAssessmentResponse:
        """
        Assess a prospective loan against the caller's track record.

        Falls back to the rule-based assessment when the AI is unavailable.
        """
        stats = await self._profile_repo.get_stats(profile.id)
        risk_input = LoanRiskInput(
            amount=amount,
            purpose=purpose,
            interest_rate=interest_rate,
            tenure_days=tenure_days,
            description=description,
            borrower_verified=profile.identity_verified,
            total_loans_taken=stats.total_loans_taken,
            successful_repayments=stats.successful_repayments,
            average_rating=stats.average_rating,
        )

        assessment, method = await self._assess(risk_input)
        logger.info(
            "loan_risk_assessed",
            user_id=profile.id,
            method=method,
            risk_level=assessment.risk_level.value,
            risk_score=assessment.risk_score,
        )

        return RiskAssessmentResponse.from_entity(assessment, method)

    async def _assess(self, risk_input: LoanRiskInput) -> Tuple[RiskAssessment, str]:
        if self._assistant.is_configured:
            try:
                return await self._assistant.analyze_loan_risk(risk_input), "ai"
            except AIServiceException as e:
                logger.warning("ai_risk_failed_using_rules", error=e.message)

        return assess_risk_with_rules(risk_input, self._settings), "rules"
