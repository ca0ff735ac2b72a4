from .pricing_service import PricingService, PricingResult, LineCost, MAX_AMOUNT, MAX_QUANTITY

__all__ = ["PricingService", "PricingResult", "LineCost", "MAX_AMOUNT", "MAX_QUANTITY"]
