"""
Gemini-backed assistant: document checks, loan risk analysis and chat.

Wraps a GenerativeAIClient with prompt construction and reply parsing.
"""

from typing import Dict, Optional, Sequence

import structlog

from src.domain.entities import (
    DocumentType,
    LoanRiskInput,
    RiskAssessment,
    VerificationResult,
)
from src.domain.exceptions import AIServiceException
from src.domain.interfaces import GenerativeAIClient
from .parsing import parse_risk_assessment, parse_verification
from .prompts import build_chat_parts, build_document_parts, build_risk_parts

logger = structlog.get_logger(__name__)

CHAT_EMPTY_REPLY = (
    "I'm sorry, I couldn't process your request right now. "
    "Please try again and let's keep the vibe going! 🚀"
)
CHAT_FAILURE_REPLY = (
    "I'm experiencing technical difficulties right now. Please try again later "
    "or contact our support team. Don't worry, we'll get back to vibing soon! 💪"
)


class AIAssistant:
    """High-level AI operations used by the application services."""

    def __init__(self, client: GenerativeAIClient):
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client.is_configured

    async def verify_document(
        self,
        document_type: DocumentType,
        image_base64: str,
        mime_type: str,
    ) -> VerificationResult:
        """
        Ask the model whether a document image is authentic.

        A failed AI call yields an invalid result rather than an error, so
        the caller can report it without persisting anything.
        """
        parts = build_document_parts(document_type, image_base64, mime_type)

        try:
            reply = await self._client.generate(parts)
        except AIServiceException as e:
            logger.error(
                "document_verification_ai_failed",
                document_type=document_type.value,
                error=e.message,
            )
            return VerificationResult(
                is_valid=False,
                confidence=0.0,
                extracted_data={},
                details="Verification failed due to technical error",
            )

        return parse_verification(document_type, reply)

    async def analyze_loan_risk(self, loan: LoanRiskInput) -> RiskAssessment:
        """
        Ask the model for a risk assessment.

        Raises:
            AIServiceException: If the model can't be reached
        """
        reply = await self._client.generate(build_risk_parts(loan))
        return parse_risk_assessment(reply)

    async def chat(
        self,
        message: str,
        history: Optional[Sequence[Dict[str, str]]] = None,
    ) -> str:
        parts = build_chat_parts(message, history or [])

        try:
            reply = await self._client.generate(parts)
        except AIServiceException as e:
            logger.error("chat_ai_failed", error=e.message)
            return CHAT_FAILURE_REPLY

        return reply.strip() or CHAT_EMPTY_REPLY

