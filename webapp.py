"""Flask based JSON API for RAM price lookups."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from price_core import (
    LookupResult,
    OfferCache,
    PriceScraper,
    create_config_from_env,
    lookup_prices,
    refresh_prices,
)
from price_core.processor import summarise_offers

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

app = Flask(__name__)

scraper_config = create_config_from_env()
offer_cache = OfferCache(ttl=scraper_config.cache_ttl, max_entries=scraper_config.cache_max_entries)
price_scraper = PriceScraper(scraper_config, cache=offer_cache)


@app.route("/health")
def health():
    return "ok", 200


@app.route("/api/prices", methods=["POST"])
def prices():
    payload = request.get_json(silent=True) or {}
    module_number = str(payload.get("moduleNumber") or "").strip()
    if not module_number:
        return jsonify({"error": "Module number is required"}), 400

    result = lookup_prices(module_number, price_scraper)
    return jsonify(
        {
            "products": [offer.to_dict() for offer in result.offers],
            "query": result.query,
            "refined": result.refined,
        }
    )


@app.route("/api/product", methods=["POST"])
def product():
    payload = request.get_json(silent=True) or {}
    url = str(payload.get("url") or payload.get("id") or "").strip()
    if not url:
        return jsonify({"error": "url or id required"}), 400

    offers = price_scraper.scrape_product(url)
    return jsonify({"products": [offer.to_dict() for offer in offers]})


@app.route("/api/refresh", methods=["POST"])
def refresh():
    payload = request.get_json(silent=True) or {}
    module_numbers = payload.get("moduleNumbers")
    if not isinstance(module_numbers, list) or not module_numbers:
        return jsonify({"error": "moduleNumbers must be a non-empty list"}), 400

    def _log(result: LookupResult) -> None:
        LOGGER.info("Refreshed %s: %d offers", result.module_number, len(result.offers))

    results = refresh_prices(
        [str(item) for item in module_numbers], price_scraper, on_result=_log
    )
    all_offers = [offer for result in results for offer in result.offers]
    body: Dict[str, Any] = {
        "results": [result.to_dict() for result in results],
        "summary": summarise_offers(all_offers),
    }
    missing: List[str] = [result.module_number for result in results if not result.offers]
    if missing:
        body["missing"] = missing
    return jsonify(body)


if __name__ == "__main__":
    app.run(debug=True)
