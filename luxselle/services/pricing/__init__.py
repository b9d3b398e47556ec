from .service import PricingService, max_buy_price
