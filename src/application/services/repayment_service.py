"""Repayment service - settles a loan from the borrower's wallet."""

from datetime import datetime
from typing import Dict, List

import structlog

from src.application.dto import LenderPaymentDTO, RepaymentResponse, RepayLoanRequest
from src.core.metrics import record_repayment
from src.core.timeutils import to_utc_iso
from src.domain.entities import (
    AgreementStatus,
    AgreementType,
    LoanAgreement,
    LoanFunding,
    LoanRepayment,
    LoanRequest,
    ReferenceType,
    Wallet,
)
from src.domain.exceptions import (
    InsufficientFundsException,
    InvalidAmountException,
    LoanNotFoundException,
    LoanNotRepayableException,
    WalletNotFoundException,
)
from src.domain.interfaces import (
    AgreementRepository,
    LoanRepository,
    ProfileRepository,
    WalletRepository,
)
from src.service.pricing import (
    PricingSettings,
    platform_fee_paise,
    pricing_settings,
    simple_interest_paise,
)
from .loan_service import parse_loan_id

logger = structlog.get_logger(__name__)


def split_among_lenders(net_paise: int, fundings: List[LoanFunding]) -> List[int]:
    """
    Split a payout pro rata to each funding.

    Shares are floored to whole paise; the rounding remainder goes to the
    first lender so the shares always sum to ``net_paise``.
    """
    total_funded = sum(f.amount_paise for f in fundings)
    if total_funded <= 0:
        return [0 for _ in fundings]

    shares = [net_paise * f.amount_paise // total_funded for f in fundings]
    shares[0] += net_paise - sum(shares)
    return shares


class RepaymentService:
    """
    Application service for the loan repayment use case.

    All writes happen in the request's database transaction; the closure
    agreement is written in a savepoint so its failure doesn't undo the
    money movement.
    """

    def __init__(
        self,
        loan_repository: LoanRepository,
        wallet_repository: WalletRepository,
        profile_repository: ProfileRepository,
        agreement_repository: AgreementRepository,
        currency: str = "INR",
        settings: PricingSettings = pricing_settings,
    ):
        self._loan_repo = loan_repository
        self._wallet_repo = wallet_repository
        self._profile_repo = profile_repository
        self._agreement_repo = agreement_repository
        self._currency = currency
        self._settings = settings

    async def repay_loan(self, request: RepayLoanRequest) -> RepaymentResponse:
        """
        Repay a loan in full from the borrower's wallet.

        The borrower is debited the repayment amount; lenders share the
        amount less the platform fee in proportion to what they funded.

        Args:
            request: Borrower, loan and optional repayment amount in paise

        Returns:
            RepaymentResponse with the fee breakdown and lender payouts

        Raises:
            LoanNotFoundException: If the loan doesn't exist or isn't the caller's
            LoanNotRepayableException: If the loan isn't funded/active or has no fundings
            InvalidAmountException: If the amount is below principal plus interest
            WalletNotFoundException: If the borrower has no wallet
            InsufficientFundsException: If the wallet doesn't cover the amount
        """
        errors = request.validate()
        if errors:
            raise InvalidAmountException("; ".join(errors))

        loan = await self._loan_repo.get_by_id(parse_loan_id(request.loan_id), for_update=True)
        if loan is None or loan.borrower_id != request.borrower_id:
            raise LoanNotFoundException(request.loan_id)

        if not loan.is_repayable:
            raise LoanNotRepayableException()

        if not loan.fundings or loan.total_funded_paise <= 0:
            raise LoanNotRepayableException("Loan has no fundings to repay")

        principal = loan.total_funded_paise
        interest = simple_interest_paise(principal, loan.interest_rate, loan.tenure_days)
        amount_due = principal + interest
        amount = request.repayment_amount_paise or amount_due

        if amount < amount_due:
            raise InvalidAmountException(
                f"Repayment amount must be at least ₹{amount_due / 100:.2f}"
            )

        borrower_wallet = await self._wallet_repo.get(
            request.borrower_id,
            self._currency,
            for_update=True,
        )
        if borrower_wallet is None:
            raise WalletNotFoundException(request.borrower_id)

        if borrower_wallet.balance_paise < amount:
            raise InsufficientFundsException(
                required_paise=amount,
                available_paise=borrower_wallet.balance_paise,
            )

        fee = platform_fee_paise(principal, self._settings)
        net_to_lenders = amount - fee

        log = logger.bind(
            loan_id=str(loan.id),
            borrower_id=request.borrower_id,
            repayment_paise=amount,
        )
        log.info(
            "loan_repayment_calculated",
            principal_paise=principal,
            interest_rate=loan.interest_rate,
            interest_paise=interest,
            platform_fee_paise=fee,
            net_to_lenders_paise=net_to_lenders,
        )

        lender_payments = await self._pay_lenders(loan, net_to_lenders, request.borrower_id)

        debit = borrower_wallet.debit(
            amount,
            description=f"Loan repayment - ₹{amount / 100:.2f}",
            reference_type=ReferenceType.LOAN_REPAYMENT,
            reference_id=str(loan.id),
            metadata={
                "loan_id": str(loan.id),
                "platform_fee": fee / 100,
                "platform_fee_percentage": self._settings.platform_fee_percentage,
                "interest_amount": interest / 100,
                "net_to_lenders": net_to_lenders / 100,
            },
        )
        await self._wallet_repo.apply(borrower_wallet, debit)

        await self._loan_repo.save_repayment(
            LoanRepayment(
                loan_id=loan.id,
                borrower_id=request.borrower_id,
                lender_id=loan.primary_lender_id,
                repayment_amount_paise=amount,
                platform_fee_paise=fee,
                net_amount_to_lender_paise=net_to_lenders,
                transaction_id=debit.id,
            )
        )

        loan.mark_completed()
        await self._loan_repo.update(loan)
        record_repayment(amount, fee)

        closure_created = await self._create_closure_agreement(
            loan,
            request.borrower_id,
            amount,
            interest,
            fee,
            net_to_lenders,
            lender_payments,
        )

        log.info(
            "loan_repaid",
            lenders=len(lender_payments),
            borrower_balance_paise=borrower_wallet.balance_paise,
            closure_document_created=closure_created,
        )

        return RepaymentResponse(
            loan_id=str(loan.id),
            repayment_amount=amount / 100,
            platform_fee=fee / 100,
            platform_fee_percentage=self._settings.platform_fee_percentage,
            interest_amount=interest / 100,
            net_amount_to_lender=net_to_lenders / 100,
            new_borrower_balance=borrower_wallet.balance_rupees,
            lender_payments=lender_payments,
            closure_document_created=closure_created,
        )

    async def _pay_lenders(
        self,
        loan: LoanRequest,
        net_to_lenders: int,
        borrower_id: str,
    ) -> List[LenderPaymentDTO]:
        """Credit each funding's share to its lender's wallet."""
        shares = split_among_lenders(net_to_lenders, loan.fundings)
        wallets: Dict[str, Wallet] = {}
        payments = []

        for funding, share in zip(loan.fundings, shares):
            wallet = wallets.get(funding.lender_id)
            if wallet is None:
                wallet = await self._wallet_repo.get_or_create(
                    funding.lender_id,
                    self._currency,
                    for_update=True,
                )
                wallets[funding.lender_id] = wallet

            if share > 0:
                credit = wallet.credit(
                    share,
                    description=f"Loan repayment received - ₹{share / 100:.2f}",
                    reference_type=ReferenceType.LOAN_REPAYMENT,
                    reference_id=str(loan.id),
                    metadata={
                        "loan_id": str(loan.id),
                        "borrower_id": borrower_id,
                        "original_funding": funding.amount_paise / 100,
                    },
                )
                await self._wallet_repo.apply(wallet, credit)

            payments.append(
                LenderPaymentDTO(
                    lender_id=funding.lender_id,
                    lender_name=funding.lender_name,
                    lender_email=funding.lender_email,
                    amount=share / 100,
                )
            )

        return payments

    async def _create_closure_agreement(
        self,
        loan: LoanRequest,
        borrower_id: str,
        amount: int,
        interest: int,
        fee: int,
        net_to_lenders: int,
        lender_payments: List[LenderPaymentDTO],
    ) -> bool:
        """Write the loan closure document; a failure is logged, not raised."""
        borrower = await self._profile_repo.get_by_id(borrower_id)
        primary = lender_payments[0]
        now = datetime.utcnow()

        agreement = LoanAgreement(
            loan_id=loan.id,
            borrower_id=borrower_id,
            lender_id=loan.primary_lender_id,
            agreement_type=AgreementType.LOAN_CLOSURE,
            agreement_data={
                "loan_id": str(loan.id),
                "borrower_id": borrower_id,
                "lender_id": loan.primary_lender_id,
                "loan_amount": loan.amount_paise / 100,
                "repayment_amount": amount / 100,
                "interest_rate": loan.interest_rate,
                "interest_amount": interest / 100,
                "platform_fee": fee / 100,
                "platform_fee_percentage": self._settings.platform_fee_percentage,
                "net_amount_to_lender": net_to_lenders / 100,
                "purpose": loan.purpose.value,
                "created_at": to_utc_iso(loan.created_at),
                "repaid_at": to_utc_iso(now),
                "borrower": {
                    "name": borrower.name if borrower else "Borrower",
                    "email": borrower.email if borrower else "",
                },
                "lender": {
                    "name": primary.lender_name or "Lender",
                    "email": primary.lender_email or "",
                },
            },
            status=AgreementStatus.COMPLETED,
            signed_at=now,
        )

        try:
            await self._agreement_repo.save_in_savepoint(agreement)
        except Exception as e:
            logger.error(
                "loan_closure_document_failed",
                loan_id=str(loan.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        return True
