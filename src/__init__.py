"""
Vibe Gateway - P2P Student Lending Service

A FastAPI-based backend that handles wallets, loan requests, funding,
repayments, Stripe payments and AI-assisted document verification.
"""

__version__ = "0.1.0"
