from .offers import router as offers_router
from .payments import router as payments_router
from .rents import router as rents_router
from .agreements import router as agreements_router

__all__ = ["offers_router", "payments_router", "rents_router", "agreements_router"]
