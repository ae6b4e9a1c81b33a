"""
Parsing of free-text Gemini replies.

The model is asked for JSON but often wraps it in prose or markdown, so the
first ``{...}`` block is extracted and decoded. When that fails, document
checks fall back to keyword heuristics.
"""

import json
import re
from typing import Any, Dict

from src.domain.entities import (
    DocumentType,
    RiskAssessment,
    RiskLevel,
    VerificationResult,
)

JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> Dict[str, Any]:
    """
    Decode the first JSON object embedded in ``text``.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    match = JSON_BLOCK.search(text or "")
    if not match:
        raise ValueError("No JSON found in response")

    result = json.loads(match.group(0))
    if not isinstance(result, dict):
        raise ValueError("Response JSON is not an object")
    return result


def parse_verification(document_type: DocumentType, text: str) -> VerificationResult:
    """Turn a document-check reply into a VerificationResult."""
    try:
        result = extract_json(text)
    except ValueError:
        return _verification_heuristic(document_type, text)

    default_details = (
        "Government ID analysis completed"
        if document_type == DocumentType.GOVERNMENT_ID
        else "Medical prescription analysis completed"
    )
    try:
        confidence = float(result.get("confidence") or 0)
    except (TypeError, ValueError):
        confidence = 0.0

    # The model sometimes answers "none" or a list here
    extracted_data = result.get("extractedData")
    if not isinstance(extracted_data, dict):
        extracted_data = {}

    details = result.get("details")
    if not isinstance(details, str) or not details:
        details = default_details

    return VerificationResult(
        is_valid=bool(result.get("isValid") or False),
        confidence=max(0.0, min(1.0, confidence)),
        extracted_data=extracted_data,
        details=details,
    )


def _verification_heuristic(document_type: DocumentType, text: str) -> VerificationResult:
    lowered = (text or "").lower()

    if document_type == DocumentType.GOVERNMENT_ID:
        is_valid = (
            "valid" in lowered
            and "invalid" not in lowered
            and "fake" not in lowered
        )
        confidence = 0.7 if is_valid else 0.3
        default_details = "Document analysis completed"
    else:
        is_valid = (
            "prescription" in lowered
            and "doctor" in lowered
            and "fake" not in lowered
        )
        confidence = 0.6 if is_valid else 0.2
        default_details = "Prescription analysis completed"

    return VerificationResult(
        is_valid=is_valid,
        confidence=confidence,
        extracted_data={},
        details=text or default_details,
    )


def parse_risk_assessment(text: str) -> RiskAssessment:
    """Turn a risk-analysis reply into a RiskAssessment."""
    try:
        result = extract_json(text)
    except ValueError:
        return RiskAssessment(
            risk_level=RiskLevel.MEDIUM,
            risk_score=50,
            recommendations=["Verify borrower identity", "Check repayment history"],
            concerns=["Limited data available for assessment"],
        )

    try:
        level = RiskLevel(str(result.get("riskLevel", "medium")).lower())
    except ValueError:
        level = RiskLevel.MEDIUM

    try:
        score = int(result.get("score") or 50)
    except (TypeError, ValueError):
        score = 50

    return RiskAssessment(
        risk_level=level,
        risk_score=max(0, min(100, score)),
        recommendations=[str(item) for item in result.get("recommendations") or []],
        concerns=[str(item) for item in result.get("concerns") or []],
    )
