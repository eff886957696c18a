from .promotion import PromotionService

__all__ = ["PromotionService"]
