from fastapi import APIRouter

from .health import health_router
from .wallet import wallet_router
from .loans import loans_router
from .verification import verification_router
from .agreements import agreements_router
from .payments import payments_router
from .chat import chat_router
from .profile import profile_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(profile_router, tags=["Profile"])
router.include_router(wallet_router, tags=["Wallet"])
router.include_router(loans_router, tags=["Loans"])
router.include_router(verification_router, tags=["Verification"])
router.include_router(agreements_router, tags=["Agreements"])
router.include_router(payments_router, tags=["Payments"])
router.include_router(chat_router, tags=["Chat"])
