"""Tests for the individual page extraction strategies."""
from __future__ import annotations

import math

from price_core.config import ScraperConfig
from price_core.models import AvailabilityStatus
from price_core.sources import (
    PRODUCT_STRATEGIES,
    SEARCH_STRATEGIES,
    extract_heading_price,
    extract_naive_listing,
    extract_primary_card,
    extract_product_offers,
    extract_structured_offers,
    find_first_product_link,
)

PAGE_URL = "https://www.prisjakt.nu/produkt.php?p=5135910"


def test_strategies_are_ordered_by_reliability() -> None:
    assert [name for name, _ in SEARCH_STRATEGIES] == [
        "primary-card",
        "structured-data",
        "naive-listing",
    ]
    assert [name for name, _ in PRODUCT_STRATEGIES] == ["structured-data", "product-offers"]


def test_structured_data_skips_malformed_blocks_and_bad_prices(structured_data_html, config) -> None:
    offers = extract_structured_offers(structured_data_html, PAGE_URL, config)

    assert [offer.store for offer in offers] == ["Proshop", "MJ Multimedia", "Prisjakt"]
    proshop, mj, _ = offers
    assert proshop.price == 1299.0
    assert proshop.id == "KF572C38RWAK2-32::https://shop-a.example/p1"
    assert proshop.store_url == "https://shop-a.example/p1"
    assert proshop.availability is AvailabilityStatus.IN_STOCK
    assert proshop.image_url == "https://img.example/1.jpg"

    assert mj.price == 1349.0
    assert mj.id == "KF572C38RWAK2-32::MJ Multimedia"
    assert mj.store_url == "https://www.prisjakt.nu/produkt.php?p=5135910"
    assert mj.currency == "SEK"
    assert mj.availability is AvailabilityStatus.INCOMING


def test_structured_data_walks_nested_nodes_and_single_offers(config) -> None:
    html = """
    <script type="application/ld+json">
    [{"@type": "WebPage", "mainEntity": {"@type": "Product", "name": "G.Skill Trident Z5",
      "image": "https://img.example/z5.jpg",
      "offers": {"@type": "AggregateOffer", "lowPrice": "2.149,50", "priceCurrency": "SEK",
                 "availability": "InStock"}}}]
    </script>
    """
    offers = extract_structured_offers(html, PAGE_URL, config)

    assert len(offers) == 1
    assert offers[0].name == "G.Skill Trident Z5"
    assert offers[0].price == 2149.5
    assert offers[0].store == "Unknown"
    assert offers[0].id == "G.Skill Trident Z5::"
    assert offers[0].image_url == "https://img.example/z5.jpg"


def test_structured_data_ignores_nameless_products(config) -> None:
    html = """
    <script type="application/ld+json">
    {"@type": "Product", "offers": {"price": 100, "seller": {"name": "Inet"}}}
    </script>
    """
    assert extract_structured_offers(html, PAGE_URL, config) == []


def test_structured_data_ignores_blank_product_names(config) -> None:
    html = """
    <script type="application/ld+json">
    {"@type": "Product", "name": "   ", "offers": {"price": 100, "seller": {"name": "Inet"}}}
    </script>
    """
    assert extract_structured_offers(html, PAGE_URL, config) == []


def test_primary_card_yields_single_in_stock_offer(primary_card_html, config) -> None:
    offers = extract_primary_card(primary_card_html, "https://www.prisjakt.nu/search", config)

    assert len(offers) == 1
    offer = offers[0]
    assert offer.name == "Corsair Vengeance RGB DDR5 48GB 7000MHz CL36"
    assert offer.price == 2095.0
    assert offer.store == "MJ Multimedia"
    assert offer.id == "/produkt.php?p=11995740"
    assert offer.store_url == "https://www.prisjakt.nu/produkt.php?p=11995740"
    assert offer.availability is AvailabilityStatus.IN_STOCK


def test_primary_card_rejects_noise_store_labels(primary_card_html, config) -> None:
    for label in ("Prisjakt", "PRISJAKT", "Annons", "Butik"):
        html = primary_card_html.replace("MJ Multimedia", label)
        assert extract_primary_card(html, "https://www.prisjakt.nu/search", config) == [], label


def test_primary_card_rejects_configured_host_brand(primary_card_html) -> None:
    config = ScraperConfig(host_brand="PriceRunner")
    html = primary_card_html.replace("MJ Multimedia", "PriceRunner")

    assert extract_primary_card(html, "https://www.prisjakt.nu/search", config) == []


def test_primary_card_missing_link_means_no_match(listing_html, config) -> None:
    assert extract_primary_card(listing_html, "https://www.prisjakt.nu/search", config) == []


def test_naive_listing_deduplicates_and_attributes_stores(listing_html, config) -> None:
    offers = extract_naive_listing(listing_html, "https://www.prisjakt.nu/search", config)

    assert [(offer.name, offer.price, offer.store) for offer in offers] == [
        ("Corsair 32GB DDR5", 1499.0, "inet.se"),
        ("Kingston 16GB DDR4", 899.0, "Prisjakt"),
    ]
    assert offers[1].store_url == "https://www.prisjakt.nu/produkt/kingston-16gb"


def test_naive_listing_is_capped(config) -> None:
    anchors = "".join(
        f'<a href="https://shop{i}.example/x"><h3>Module {chr(65 + i)}</h3><span>{100 + i} kr</span></a>'
        for i in range(25)
    )
    offers = extract_naive_listing(f"<html><body>{anchors}</body></html>", "", config)

    assert len(offers) == config.naive_result_limit == 10
    assert all(offer.price > 0 and math.isfinite(offer.price) for offer in offers)


def test_product_offers_keep_lowest_price_per_store(product_page_html, config) -> None:
    offers = extract_product_offers(product_page_html, PAGE_URL, config)

    assert [(offer.store, offer.price) for offer in offers] == [
        ("Proshop", 1199.0),
        ("MJ Multimedia", 1349.0),
        ("Inet", 1399.0),
    ]
    by_store = {offer.store: offer for offer in offers}
    assert by_store["Proshop"].store_url.endswith("/go-to-shop/5135910/b")
    assert by_store["Proshop"].availability is AvailabilityStatus.NOT_AVAILABLE
    assert by_store["MJ Multimedia"].availability is AvailabilityStatus.INCOMING
    assert by_store["Inet"].availability is AvailabilityStatus.IN_STOCK
    assert by_store["Inet"].id == f"{PAGE_URL}::Inet"
    assert all(offer.name == "Kingston FURY Renegade RGB DDR5 32GB" for offer in offers)


def test_page_wide_sold_out_marker_overrides_icons(sold_out_product_page_html, config) -> None:
    offers = extract_product_offers(sold_out_product_page_html, PAGE_URL, config)

    assert offers
    assert {offer.availability for offer in offers} == {AvailabilityStatus.NOT_AVAILABLE}


def test_product_offers_skip_site_labels(product_page_html, config) -> None:
    offers = extract_product_offers(product_page_html, PAGE_URL, config)
    urls = {offer.store_url.rsplit("/", 1)[-1] for offer in offers}

    assert urls.isdisjoint({"d", "g", "h", "i", "j"})
    assert min(offer.price for offer in offers) == 1199.0


def test_product_offers_reject_configured_host_brand(product_page_html) -> None:
    config = ScraperConfig(host_brand="PriceRunner")
    html = product_page_html.replace(">Inet<", ">PriceRunner Sverige<")
    stores = [offer.store for offer in extract_product_offers(html, PAGE_URL, config)]

    assert "PriceRunner Sverige" not in stores
    assert {"Proshop", "MJ Multimedia"} <= set(stores)


def test_product_offers_need_a_heading(product_page_html, config) -> None:
    html = product_page_html.replace("<h1>", "<h2>").replace("</h1>", "</h2>")
    assert extract_product_offers(html, PAGE_URL, config) == []


def test_heading_price_defaults_to_host_store(heading_only_html, config) -> None:
    offers = extract_heading_price(heading_only_html, PAGE_URL, config)

    assert len(offers) == 1
    assert offers[0].name == "Corsair Vengeance DDR5 48GB"
    assert offers[0].price == 2095.0
    assert offers[0].store == "Prisjakt"
    assert offers[0].store_url == PAGE_URL
    assert offers[0].availability is AvailabilityStatus.IN_STOCK


def test_find_first_product_link(config) -> None:
    html = '<a href="/om">Om</a><a href="/produkt.php?p=42">Produkt</a><a href="/produkt.php?p=7">x</a>'
    assert find_first_product_link(html, config) == "https://www.prisjakt.nu/produkt.php?p=42"
    assert find_first_product_link("<p>nothing</p>", config) is None
