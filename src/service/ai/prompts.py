"""Prompt templates for Gemini."""

from typing import Dict, List, Sequence

from src.domain.entities import DocumentType, LoanRiskInput

GOVERNMENT_ID_PROMPT = """
Analyze this government ID document image and provide a detailed verification report for Vibe P2P lending platform.

Please examine:
1. Document authenticity and security features
2. Text clarity and readability
3. Photo quality and tampering signs
4. Document format and layout
5. Extract all visible text information

Respond in JSON format:
{
  "isValid": boolean,
  "confidence": number (0-1),
  "documentType": "string",
  "extractedData": {
    "name": "string",
    "idNumber": "string",
    "dateOfBirth": "string",
    "address": "string",
    "issueDate": "string",
    "expiryDate": "string"
  },
  "securityFeatures": ["list of detected security features"],
  "concerns": ["list of any concerns or red flags"],
  "details": "detailed explanation"
}

Be thorough but concise. Focus on authenticity verification for P2P lending security.
"""

MEDICAL_PRESCRIPTION_PROMPT = """
Analyze this medical prescription image and verify its authenticity for Vibe P2P lending platform.

Please examine:
1. Doctor's signature and stamp
2. Hospital/clinic letterhead
3. Prescription format and layout
4. Medicine names and dosages
5. Date and validity
6. Patient information

Respond in JSON format:
{
  "isValid": boolean,
  "confidence": number (0-1),
  "extractedData": {
    "doctorName": "string",
    "hospitalName": "string",
    "patientName": "string",
    "medications": ["list of medicines"],
    "dosages": ["list of dosages"],
    "date": "string",
    "validUntil": "string",
    "diagnosis": "string"
  },
  "medicalValidity": {
    "hasSignature": boolean,
    "hasStamp": boolean,
    "hasLetterhead": boolean,
    "dateValid": boolean
  },
  "concerns": ["list of any concerns"],
  "details": "detailed explanation"
}

Focus on medical authenticity and prescription validity for student medical loan verification.
"""

DOCUMENT_PROMPTS = {
    DocumentType.GOVERNMENT_ID: GOVERNMENT_ID_PROMPT,
    DocumentType.MEDICAL_PRESCRIPTION: MEDICAL_PRESCRIPTION_PROMPT,
}

RISK_PROMPT_TEMPLATE = """
Analyze this loan request for risk assessment on Vibe P2P lending platform:

Loan Details:
- Amount: {amount}
- Purpose: {purpose}
- Interest Rate: {interest_rate}%
- Tenure: {tenure_days} days
- Description: {description}

User Profile:
- Verified: {verified}
- Previous Loans: {total_loans_taken}
- Successful Repayments: {successful_repayments}
- Average Rating: {average_rating}

Provide risk assessment in JSON format:
{{
  "riskLevel": "low|medium|high",
  "score": number (0-100),
  "recommendations": ["list of recommendations for lenders"],
  "concerns": ["list of potential concerns"],
  "positiveFactors": ["list of positive factors"],
  "analysis": "detailed risk analysis"
}}

Consider this is for student lending on Vibe platform.
"""

ASSISTANT_PROMPT = """
You are Vibe AI Assistant, a helpful and friendly chatbot for Vibe - a peer-to-peer lending platform for students.

Platform Info:
- Name: Vibe
- Tagline: "Lend, Borrow, Connect – Vibe!"
- Purpose: P2P lending platform connecting students
- Key Features: AI document checks, wallet-based funding and repayment, lightning-fast funding

Your personality:
- Friendly, enthusiastic, and helpful
- Use "vibe" language naturally but not excessively
- Show empathy for students' financial challenges

Your role:
- Help users understand how P2P lending works on Vibe
- Guide them through posting and funding requests
- Explain identity checks and the AI-powered features
- Provide information about interest rates (3-18% a year), the flat 4.5% platform fee and repayment terms
- Explain wallet top-ups, withdrawals and repayments

Guidelines:
- Keep responses conversational and engaging
- Use emojis appropriately to add personality
- Always prioritize user safety and financial responsibility
- Mention that P2P lending involves risks when relevant
- Encourage users to read terms and conditions
- If you don't know something, admit it and offer to help find the answer
"""

HISTORY_TURNS = 5


def build_document_parts(
    document_type: DocumentType,
    image_base64: str,
    mime_type: str,
) -> List[Dict]:
    """Prompt text followed by the inline document image."""
    return [
        {"text": DOCUMENT_PROMPTS[document_type]},
        {"inline_data": {"mime_type": mime_type, "data": image_base64}},
    ]


def build_risk_parts(loan: LoanRiskInput) -> List[Dict]:
    prompt = RISK_PROMPT_TEMPLATE.format(
        amount=loan.amount,
        purpose=loan.purpose,
        interest_rate=loan.interest_rate,
        tenure_days=loan.tenure_days,
        description=loan.description or "N/A",
        verified=str(loan.borrower_verified).lower(),
        total_loans_taken=loan.total_loans_taken,
        successful_repayments=loan.successful_repayments,
        average_rating=loan.average_rating,
    )
    return [{"text": prompt}]


def build_chat_parts(message: str, history: Sequence[Dict[str, str]]) -> List[Dict]:
    """
    Assistant instructions plus recent history, then the user's message.

    Only the last few turns of history are sent.
    """
    lines = [ASSISTANT_PROMPT.strip()]
    recent = list(history)[-HISTORY_TURNS:]
    if recent:
        lines.append("\nConversation so far:")
        for turn in recent:
            speaker = "User" if turn.get("role") == "user" else "Assistant"
            lines.append(f"{speaker}: {turn.get('content', '')}")

    return [
        {"text": "\n".join(lines)},
        {"text": f"Please respond to the user's message: {message}"},
    ]
