"""Agreement-related Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AgreementResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    loan_id: str
    borrower_id: str
    lender_id: Optional[str] = None
    agreement_type: str = Field(
        ...,
        description="loan_request, sanction_letter, lending_proof or loan_closure",
    )
    agreement_data: dict[str, Any]
    status: str
    signed_at: Optional[str] = None
    created_at: str
