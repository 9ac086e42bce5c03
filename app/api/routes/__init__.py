from .auth_route import router as auth_router
from .listings import router as listings_router
from .transactions_route import router as transactions_router
from .universities_route import router as universities_router

__all__ = [
    "auth_router",
    "listings_router",
    "transactions_router",
    "universities_router",
]
