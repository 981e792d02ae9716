"""Shared fixtures: canned Prisjakt pages and a scripted fetcher."""
from __future__ import annotations

from typing import Dict, List, Union

import pytest

from price_core.config import ScraperConfig
from price_core.errors import FetchFailure


class FakeFetcher:
    """Serve canned pages by URL; integers are returned as HTTP error codes."""

    def __init__(self, pages: Dict[str, Union[str, int]]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        page = self.pages.get(url, 404)
        if isinstance(page, int):
            raise FetchFailure(url, status=page)
        return page


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def primary_card_html() -> str:
    return """
    <html><body>
      <ul>
        <li class="SearchResult">
          <div class="card">
            <a class="Link productName css-1x" href="/produkt.php?p=11995740">
              <span>Corsair Vengeance RGB DDR5 48GB</span> 7000MHz CL36
            </a>
            <div class="price-box">
              <p class="text-m font-heaviest">2&nbsp;095 kr</p>
              <p class="text-xs text-muted">hos<span class="font-heaviest"> <!-- -->MJ Multimedia</span></p>
            </div>
          </div>
        </li>
      </ul>
    </body></html>
    """


@pytest.fixture
def structured_data_html() -> str:
    return """
    <html><head>
    <script type="application/ld+json">{ "@type": "Product", "name": </script>
    <script type="application/ld+json">
    {
      "@context": "https://schema.org",
      "@graph": [
        {"@type": "BreadcrumbList", "itemListElement": []},
        {
          "@type": ["Product", "Thing"],
          "name": "Kingston FURY Renegade RGB DDR5 32GB",
          "sku": "KF572C38RWAK2-32",
          "url": "https://www.prisjakt.nu/produkt.php?p=5135910",
          "image": ["https://img.example/1.jpg", "https://img.example/2.jpg"],
          "offers": [
            {"@type": "Offer", "price": "1 299,00", "priceCurrency": "SEK",
             "availability": "https://schema.org/InStock",
             "url": "https://shop-a.example/p1", "seller": {"name": "Proshop"}},
            {"@type": "Offer", "price": 1349,
             "availability": "https://schema.org/PreOrder",
             "seller": {"name": "MJ Multimedia"}},
            {"@type": "Offer", "price": "0", "seller": {"name": "Broken"}},
            {"@type": "Offer", "price": "1 199",
             "availability": "https://schema.org/OutOfStock",
             "seller": {"name": "Prisjakt"}}
          ]
        }
      ]
    }
    </script>
    </head><body><h1>Kingston FURY Renegade RGB DDR5 32GB</h1></body></html>
    """


@pytest.fixture
def listing_html() -> str:
    return """
    <html><body>
      <a href="https://www.inet.se/produkt/123"><h3>Corsair 32GB DDR5</h3><span>1 499 kr</span></a>
      <a href="/produkt/kingston-16gb"><h2>Kingston 16GB DDR4</h2><p>899 kr</p></a>
      <a href="/om-oss"><h3>Om Prisjakt</h3></a>
      <a href="https://www.inet.se/produkt/123"><h3>Corsair 32GB DDR5</h3><span>1 499 kr</span></a>
    </body></html>
    """


def _product_page(extra: str = "") -> str:
    return f"""
    <html><body>
      <h1>Kingston FURY Renegade RGB DDR5 32GB</h1>
      {extra}
      <ul>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/a">
          <span class="StoreInfoTitle-sc1">Proshop</span>
          <i class="IconStockInStock"></i>
          <span data-test="PriceLabel">1 299 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/b">
          <picture alt="Proshop"></picture>
          <span data-test="PriceLabel">1 199 kr</span>
          <i class="IconStockOutOfStock"></i>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/c">
          <span class="StoreInfoTitle">MJ Multimedia</span>
          <i class="IconStockIncoming"></i>
          <span data-test="PriceLabel">1&nbsp;349 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/d">
          <span class="StoreInfoTitle">Gå till butik</span>
          <span data-test="PriceLabel">999 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/e">
          <span class="StoreInfoTitle">Webhallen</span>
          <span data-test="PriceLabel">Slutsåld</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/g">
          <span class="StoreInfoTitle">Prisjakt</span>
          <span data-test="PriceLabel">899 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/h">
          <span class="StoreInfoTitle">Omdöme 4,6 av 5</span>
          <span data-test="PriceLabel">949 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/i">
          <span class="StoreInfoTitle">Visa 3 erbjudanden</span>
          <span data-test="PriceLabel">979 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/j">
          <span class="StoreInfoTitle">Rank 2</span>
          <span data-test="PriceLabel">989 kr</span>
        </a></li>
        <li><a href="https://www.prisjakt.nu/go-to-shop/5135910/f">
          <span class="StoreInfoTitle">Inet</span>
          <i class="IconStockInStock"></i>
          <span data-test="PriceLabel">1 399 kr</span>
        </a></li>
      </ul>
    </body></html>
    """


@pytest.fixture
def product_page_html() -> str:
    return _product_page()


@pytest.fixture
def sold_out_product_page_html() -> str:
    return _product_page("<p class='notice'>Ingen butik har produkten i lager</p>")


@pytest.fixture
def heading_only_html() -> str:
    return """
    <html><body>
      <h1>Corsair Vengeance DDR5 48GB</h1>
      <div class="summary">Lägsta pris just nu: 2 095 kr</div>
    </body></html>
    """
