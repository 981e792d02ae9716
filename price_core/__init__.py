"""Price scraping core exposing the offer extraction pipeline."""
from .cache import OfferCache
from .config import ScraperConfig, create_config, create_config_from_env, create_config_from_mapping
from .models import AvailabilityStatus, LookupResult, Offer
from .scraper import PriceScraper, scrape_product, scrape_search
from .workflow import clean_module_number, lookup_prices, refresh_prices

__all__ = [
    "AvailabilityStatus",
    "LookupResult",
    "Offer",
    "OfferCache",
    "PriceScraper",
    "ScraperConfig",
    "clean_module_number",
    "create_config",
    "create_config_from_env",
    "create_config_from_mapping",
    "lookup_prices",
    "refresh_prices",
    "scrape_product",
    "scrape_search",
]
