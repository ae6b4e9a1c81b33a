"""
Unit Tests for AI reply handling and document checks.

These tests verify:
1. JSON extraction from free-text model replies
2. Verification and risk parsing, including keyword fallbacks
3. Canned demo replies for each kind of prompt
4. Prompt construction for documents and chat
5. Upload decoding, validation and quality grading
"""

import base64

import pytest

from src.application.dto import VerifyDocumentRequest
from src.application.services.verification_service import assess_document_quality
from src.domain.entities import DocumentQuality, DocumentType, LoanRiskInput, RiskLevel
from src.infrastructure.clients.gemini_demo import DEFAULT_REPLY, demo_response
from src.service.ai import (
    build_chat_parts,
    build_document_parts,
    build_risk_parts,
    extract_json,
    parse_risk_assessment,
    parse_verification,
)


# =============================================================================
# JSON Extraction Tests
# =============================================================================

class TestExtractJson:
    """Tests for extract_json()."""

    def test_plain_json(self):
        assert extract_json('{"isValid": true}') == {"isValid": True}

    def test_json_in_markdown_fence(self):
        text = 'Here is the report:\n```json\n{"score": 72, "riskLevel": "Low"}\n```'

        assert extract_json(text) == {"score": 72, "riskLevel": "Low"}

    def test_nested_objects(self):
        text = 'Result {"extractedData": {"name": "Asha"}, "confidence": 0.9} done'

        assert extract_json(text)["extractedData"] == {"name": "Asha"}

    @pytest.mark.parametrize("text", ["", "no json here", "{not: valid}"])
    def test_undecodable_text(self, text):
        with pytest.raises(ValueError):
            extract_json(text)


# =============================================================================
# Verification Parsing Tests
# =============================================================================

class TestParseVerification:
    """Tests for parse_verification()."""

    def test_json_reply(self):
        result = parse_verification(
            DocumentType.GOVERNMENT_ID,
            '{"isValid": true, "confidence": 0.92, "extractedData": {"name": "Asha"}, '
            '"details": "Security features present"}',
        )

        assert result.is_valid is True
        assert result.confidence == 0.92
        assert result.extracted_data == {"name": "Asha"}
        assert result.details == "Security features present"

    def test_missing_fields_get_defaults(self):
        result = parse_verification(DocumentType.MEDICAL_PRESCRIPTION, "{}")

        assert result.is_valid is False
        assert result.confidence == 0.0
        assert result.extracted_data == {}
        assert result.details == "Medical prescription analysis completed"

    @pytest.mark.parametrize("extracted", ['"none"', '["Asha", "1234"]', "null", "42"])
    def test_non_object_extracted_data_is_dropped(self, extracted):
        result = parse_verification(
            DocumentType.GOVERNMENT_ID,
            f'{{"isValid": true, "confidence": 0.9, "extractedData": {extracted}}}',
        )

        assert result.is_valid is True
        assert result.confidence == 0.9
        assert result.extracted_data == {}

    def test_non_text_details_use_default(self):
        result = parse_verification(
            DocumentType.GOVERNMENT_ID,
            '{"isValid": true, "details": {"summary": "ok"}}',
        )

        assert result.details == "Government ID analysis completed"

    def test_confidence_is_bounded(self):
        result = parse_verification(
            DocumentType.GOVERNMENT_ID,
            '{"isValid": true, "confidence": 4}',
        )

        assert result.confidence == 1.0

    @pytest.mark.parametrize(
        "text,is_valid,confidence",
        [
            ("The ID looks valid and untampered.", True, 0.7),
            ("This ID is invalid.", False, 0.3),
            ("Looks like a valid but fake card.", False, 0.3),
        ],
    )
    def test_government_id_keywords(self, text, is_valid, confidence):
        result = parse_verification(DocumentType.GOVERNMENT_ID, text)

        assert result.is_valid is is_valid
        assert result.confidence == confidence
        assert result.details == text

    @pytest.mark.parametrize(
        "text,is_valid,confidence",
        [
            ("A prescription signed by the doctor.", True, 0.6),
            ("A prescription with no signature.", False, 0.2),
            ("A fake prescription from a doctor.", False, 0.2),
        ],
    )
    def test_prescription_keywords(self, text, is_valid, confidence):
        result = parse_verification(DocumentType.MEDICAL_PRESCRIPTION, text)

        assert result.is_valid is is_valid
        assert result.confidence == confidence


# =============================================================================
# Risk Parsing Tests
# =============================================================================

class TestParseRiskAssessment:
    """Tests for parse_risk_assessment()."""

    def test_json_reply(self):
        result = parse_risk_assessment(
            '{"riskLevel": "HIGH", "score": 20, '
            '"recommendations": ["Ask for a co-signer"], "concerns": ["No income"]}'
        )

        assert result.risk_level == RiskLevel.HIGH
        assert result.risk_score == 20
        assert result.recommendations == ["Ask for a co-signer"]
        assert result.concerns == ["No income"]

    def test_unknown_level_and_bad_score(self):
        result = parse_risk_assessment('{"riskLevel": "extreme", "score": "n/a"}')

        assert result.risk_level == RiskLevel.MEDIUM
        assert result.risk_score == 50

    def test_score_is_bounded(self):
        assert parse_risk_assessment('{"score": 250}').risk_score == 100

    def test_free_text_falls_back_to_medium(self):
        result = parse_risk_assessment("I can't assess this loan.")

        assert result.risk_level == RiskLevel.MEDIUM
        assert result.risk_score == 50
        assert result.concerns == ["Limited data available for assessment"]


# =============================================================================
# Demo Reply Tests
# =============================================================================

class TestDemoResponse:
    """Tests for demo_response()."""

    def test_government_id_prompt(self):
        parts = build_document_parts(DocumentType.GOVERNMENT_ID, "aGVsbG8=", "image/png")

        result = parse_verification(DocumentType.GOVERNMENT_ID, demo_response(parts))

        assert result.is_valid is True
        assert result.confidence == 0.85

    def test_prescription_prompt(self):
        parts = build_document_parts(
            DocumentType.MEDICAL_PRESCRIPTION,
            "aGVsbG8=",
            "image/png",
        )

        result = parse_verification(DocumentType.MEDICAL_PRESCRIPTION, demo_response(parts))

        assert result.is_valid is True
        assert result.confidence == 0.8
        assert result.extracted_data["doctorName"] == "Dr. Smith"

    def test_risk_prompt(self):
        parts = build_risk_parts(
            LoanRiskInput(amount=10000, purpose="education", interest_rate=8, tenure_days=90)
        )

        result = parse_risk_assessment(demo_response(parts))

        assert result.risk_level == RiskLevel.MEDIUM
        assert result.risk_score == 65

    @pytest.mark.parametrize(
        "message,opening",
        [
            ("Hi there", "Hello! Welcome to Vibe!"),
            ("Can I borrow money?", "Great question about loans!"),
            ("How do you verify documents?", "Vibe uses AI-powered verification!"),
            ("Is this safe?", "Security is our top priority"),
            ("I need help", "I'm here to help you vibe!"),
        ],
    )
    def test_chat_topics(self, message, opening):
        parts = build_chat_parts(message, [])

        assert demo_response(parts).startswith(opening)

    def test_chat_keywords_match_whole_words(self):
        """'this' contains 'hi' but isn't a greeting."""
        parts = build_chat_parts("Tell me about this", [])

        assert demo_response(parts) == DEFAULT_REPLY

    def test_chat_history_does_not_pick_topic(self):
        parts = build_chat_parts(
            "What's new?",
            [{"role": "user", "content": "hello"}],
        )

        assert demo_response(parts) == DEFAULT_REPLY


# =============================================================================
# Prompt Construction Tests
# =============================================================================

class TestPrompts:
    """Tests for the prompt builders."""

    def test_document_parts_carry_inline_image(self):
        parts = build_document_parts(DocumentType.GOVERNMENT_ID, "aGVsbG8=", "image/png")

        assert "government ID" in parts[0]["text"]
        assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "aGVsbG8="}}

    def test_risk_prompt_includes_borrower_record(self):
        parts = build_risk_parts(
            LoanRiskInput(
                amount=10000,
                purpose="rent",
                interest_rate=9,
                tenure_days=60,
                borrower_verified=True,
                successful_repayments=3,
            )
        )

        text = parts[0]["text"]
        assert "- Purpose: rent" in text
        assert "- Verified: true" in text
        assert "- Successful Repayments: 3" in text
        assert "- Description: N/A" in text

    def test_chat_keeps_last_five_turns(self):
        history = [{"role": "user", "content": f"message {i}"} for i in range(8)]

        context, question = build_chat_parts("latest", history)

        assert "message 2" not in context["text"]
        assert "User: message 3" in context["text"]
        assert "User: message 7" in context["text"]
        assert question["text"] == "Please respond to the user's message: latest"


# =============================================================================
# Document Upload Tests
# =============================================================================

def make_upload(image_data: str, mime_type: str = "image/png", file_name=None):
    return VerifyDocumentRequest(
        user_id="student_a",
        document_type=DocumentType.GOVERNMENT_ID,
        image_data=image_data,
        mime_type=mime_type,
        file_name=file_name,
    )


class TestDocumentUpload:
    """Tests for VerifyDocumentRequest decoding and validation."""

    def test_decode_plain_base64(self):
        assert make_upload("aGVsbG8=").decode() == b"hello"

    def test_decode_data_url(self):
        upload = make_upload("data:image/png;base64,aGVsbG8=")

        assert upload.encoded_data == "aGVsbG8="
        assert upload.decode() == b"hello"

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError, match="not valid base64"):
            make_upload("%%%not-base64%%%").decode()

    def test_valid_upload(self):
        assert make_upload("aGVsbG8=", file_name="aadhaar.PNG").validate(5) == []

    def test_empty_upload(self):
        assert make_upload("").validate(0) == ["Document is empty"]

    def test_oversized_upload(self):
        errors = make_upload("aGVsbG8=").validate(10 * 1024 * 1024 + 1)

        assert errors == ["File size too large. Please upload a file smaller than 10MB."]

    @pytest.mark.parametrize(
        "mime_type,file_name",
        [
            ("image/gif", None),
            ("image/png", "scan.exe"),
            ("text/plain", "notes.txt"),
        ],
    )
    def test_unsupported_format(self, mime_type, file_name):
        errors = make_upload("aGVsbG8=", mime_type, file_name).validate(5)

        assert errors == ["Invalid file format. Please upload JPG, PNG, or PDF files only."]

    def test_pdf_is_accepted(self):
        upload = make_upload(
            base64.b64encode(b"%PDF-1.7").decode(),
            "application/pdf",
            "prescription.pdf",
        )

        assert upload.validate(8) == []


class TestDocumentQuality:
    """Tests for assess_document_quality()."""

    def test_small_file_is_poor(self):
        quality, suggestions = assess_document_quality(50 * 1024, "image/jpeg")

        assert quality == DocumentQuality.POOR
        assert suggestions == [
            "Image appears to be low resolution. Please upload a clearer image."
        ]

    def test_medium_file_is_fair(self):
        quality, suggestions = assess_document_quality(300 * 1024, "image/jpeg")

        assert quality == DocumentQuality.FAIR
        assert len(suggestions) == 1

    def test_large_file_is_good(self):
        assert assess_document_quality(2 * 1024 * 1024, "image/png") == (
            DocumentQuality.GOOD,
            [],
        )

    def test_pdf_gets_extra_suggestion(self):
        quality, suggestions = assess_document_quality(2 * 1024 * 1024, "application/pdf")

        assert quality == DocumentQuality.GOOD
        assert suggestions[0].startswith("PDF detected.")
