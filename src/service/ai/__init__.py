"""
Generative AI Module: prompts, reply parsing and the assistant facade
"""

from .assistant import AIAssistant, CHAT_EMPTY_REPLY, CHAT_FAILURE_REPLY
from .parsing import extract_json, parse_risk_assessment, parse_verification
from .prompts import build_chat_parts, build_document_parts, build_risk_parts

__all__ = [
    "AIAssistant",
    "CHAT_EMPTY_REPLY",
    "CHAT_FAILURE_REPLY",
    "extract_json",
    "parse_risk_assessment",
    "parse_verification",
    "build_chat_parts",
    "build_document_parts",
    "build_risk_parts",
]
