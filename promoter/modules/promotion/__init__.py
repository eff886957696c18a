"""Build promotion module exports."""

from .service import PromotionService
from .controller import router as promotion_router

__all__ = ["PromotionService", "promotion_router"]
