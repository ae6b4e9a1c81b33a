"""Canned Gemini replies used when no API key is configured."""

import json
import re
from datetime import date, timedelta
from typing import Any, Dict, List


def _government_id() -> str:
    return json.dumps({
        "isValid": True,
        "confidence": 0.85,
        "documentType": "Government ID",
        "extractedData": {
            "name": "John Doe",
            "idNumber": "XXXX-XXXX-1234",
            "dateOfBirth": "1995-01-01",
            "address": "123 Main St, City",
            "issueDate": "2020-01-01",
            "expiryDate": "2030-01-01",
        },
        "securityFeatures": ["Hologram", "Watermark", "Digital signature"],
        "concerns": [],
        "details": "Mock verification: Government ID appears authentic with standard security features.",
    })


def _prescription() -> str:
    today = date.today()
    return json.dumps({
        "isValid": True,
        "confidence": 0.80,
        "extractedData": {
            "doctorName": "Dr. Smith",
            "hospitalName": "City Hospital",
            "patientName": "Patient Name",
            "medications": ["Medicine A", "Medicine B"],
            "dosages": ["10mg daily", "5mg twice daily"],
            "date": today.isoformat(),
            "validUntil": (today + timedelta(days=30)).isoformat(),
            "diagnosis": "Medical condition",
        },
        "medicalValidity": {
            "hasSignature": True,
            "hasStamp": True,
            "hasLetterhead": True,
            "dateValid": True,
        },
        "concerns": [],
        "details": "Mock verification: Medical prescription appears valid with proper medical formatting.",
    })


def _risk_assessment() -> str:
    return json.dumps({
        "riskLevel": "medium",
        "score": 65,
        "recommendations": [
            "Verify borrower identity",
            "Check repayment history",
            "Consider loan purpose",
        ],
        "concerns": [
            "Limited credit history",
            "High loan amount relative to income",
        ],
        "positiveFactors": ["Verified user", "Clear loan purpose", "Reasonable interest rate"],
        "analysis": "Mock analysis: Moderate risk loan with standard verification requirements.",
    })


CHAT_REPLIES = [
    (
        ("hello", "hi"),
        "Hello! Welcome to Vibe! I'm your AI assistant here to help you with everything "
        "related to peer-to-peer lending. Whether you want to lend money, borrow funds, "
        "or learn about our platform, I'm here to help you vibe! What would you like to know?",
    ),
    (
        ("loan", "borrow"),
        "Great question about loans! On Vibe, you can both lend and borrow money. To post "
        "a loan request, you'll need to verify your identity, provide details about why you "
        "need the funds, and set your interest rate and repayment terms. Our AI verifies "
        "documents instantly, and you can get funded in under 5 minutes! Would you like me "
        "to guide you through the process?",
    ),
    (
        ("verification", "verify"),
        "Vibe uses AI-powered verification! We use Gemini AI to verify government IDs and "
        "medical prescriptions. For medical loans, we can verify prescriptions instantly. "
        "The process is secure, fast, and your data is protected. What type of verification "
        "do you need help with?",
    ),
    (
        ("interest", "rate"),
        "Interest rates on Vibe are competitive! Typically, rates range from 3-18% annually "
        "depending on the loan purpose, amount, tenure and the borrower's profile. Verified "
        "medical loans get lower rates. Our AI analyzes risk factors to suggest fair rates, "
        "and the platform keeps a flat 4.5% fee on the principal. Would you like to know "
        "more about how rates are determined?",
    ),
    (
        ("safe", "security"),
        "Security is our top priority at Vibe! We use AI-powered document verification and "
        "bank-grade encryption, and every wallet movement is recorded in a ledger. However, "
        "remember that P2P lending involves risks, so always assess loans carefully. What "
        "specific security aspect would you like to know about?",
    ),
    (
        ("help", "support"),
        "I'm here to help you vibe! I can assist with:\n\n"
        "🏦 Loan posting and funding processes\n"
        "🔍 AI verification and document upload\n"
        "💰 Interest rates and repayment terms\n"
        "👛 Wallet top-ups and withdrawals\n\n"
        "What would you like help with today?",
    ),
]

DEFAULT_REPLY = (
    "Thanks for reaching out! I'm your Vibe AI assistant, powered by Gemini AI. I'm "
    "currently running in demo mode, but I'm still here to help you understand our P2P "
    "lending platform!\n\nVibe connects students for lending and borrowing with features "
    "like:\n✨ AI-powered verification\n👛 Wallet-based funding and repayment\n"
    "⚡ Lightning-fast funding\n\nHow can I help you start vibing today? Feel free to ask "
    "about loans, verification, security, or any other features!"
)


def _texts(parts: List[Dict[str, Any]]) -> List[str]:
    return [part["text"] for part in parts if "text" in part]


def demo_response(parts: List[Dict[str, Any]]) -> str:
    """
    Pick a canned reply for a request.

    Document and risk prompts are recognized from the first text part;
    chat replies are keyed on the last text part (the user's message).
    """
    texts = _texts(parts)
    prompt = texts[0] if texts else ""

    if "risk assessment" in prompt:
        return _risk_assessment()
    if "government ID" in prompt or "government_id" in prompt:
        return _government_id()
    if "prescription" in prompt:
        return _prescription()

    message = (texts[-1] if texts else "").lower()
    for keywords, reply in CHAT_REPLIES:
        if any(re.search(rf"\b{keyword}\b", message) for keyword in keywords):
            return reply

    return DEFAULT_REPLY
