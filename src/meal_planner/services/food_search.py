"""Open Food Facts product search."""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from meal_planner.domain.products import Product
from meal_planner.errors import UpstreamServiceError

_SERVING_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([a-zA-Z]+)?")
_MAX_TERMS = 3
_RESULTS_PER_TERM = 5
_MAX_RESULTS = 10

_logger = logging.getLogger(__name__)


class ProductClient(Protocol):
    """Interface for Open Food Facts API interactions."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by name and return raw API data."""


@dataclass
class FoodSearchService:
    """Service for product lookups by barcode or search term."""

    client: ProductClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def by_barcode(self, barcode: str) -> Product | None:
        """Return the product for a barcode, or None when unknown."""
        payload = await self._call_with_retry(
            lambda: self.client.get_product(barcode), action=f"product:{barcode}"
        )
        if payload.get("status") == 0:
            return None
        product = payload.get("product") or {}
        return _to_product(str(payload.get("code") or barcode), product)

    async def by_name(self, query: str, page_size: int = 20) -> list[Product]:
        """Return products whose name matches a query."""
        payload = await self._call_with_retry(
            lambda: self.client.search_products(query, page_size=page_size),
            action=f"search:{query}",
        )
        products = []
        for raw in payload.get("products") or []:
            product = _to_product(str(raw.get("code") or ""), raw)
            if product is not None:
                products.append(product)
        return products

    async def search_terms(self, terms: list[str]) -> list[Product]:
        """Search the first few terms and merge results by barcode.

        Products without a barcode cannot be matched and are all kept.
        """
        results: list[Product] = []
        for term in terms[:_MAX_TERMS]:
            try:
                results.extend(await self.by_name(term, page_size=_RESULTS_PER_TERM))
            except UpstreamServiceError:
                _logger.exception("Product search failed", extra={"term": term})
        seen: set[str] = set()
        unique = []
        for product in results:
            if product.barcode:
                if product.barcode in seen:
                    continue
                seen.add(product.barcode)
            unique.append(product)
        return unique[:_MAX_RESULTS]

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call the product API with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Open Food Facts %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise UpstreamServiceError("Open Food Facts", str(exc)) from exc
                await asyncio.sleep(self.retry_delay_seconds)


def _to_product(barcode: str, product: dict[str, object]) -> Product | None:
    """Normalise an Open Food Facts product; None when it has no name."""
    name = product.get("product_name")
    if not name:
        return None
    nutriments = product.get("nutriments") or {}
    serving_size = None
    serving_unit = "g"
    raw_serving = product.get("serving_size")
    if isinstance(raw_serving, str):
        match = _SERVING_PATTERN.search(raw_serving)
        if match:
            serving_size = float(match.group(1))
            serving_unit = match.group(2) or "g"
    raw_categories = product.get("categories")
    categories = (
        [category.strip() for category in raw_categories.split(",")][:3]
        if isinstance(raw_categories, str) and raw_categories
        else []
    )
    sodium = nutriments.get("sodium_100g")
    return Product(
        barcode=barcode,
        name=str(name),
        brand=product.get("brands") or None,
        calories_per_100g=nutriments.get("energy-kcal_100g"),
        protein_per_100g=nutriments.get("proteins_100g"),
        carbs_per_100g=nutriments.get("carbohydrates_100g"),
        fat_per_100g=nutriments.get("fat_100g"),
        fiber_per_100g=nutriments.get("fiber_100g"),
        sugar_per_100g=nutriments.get("sugars_100g"),
        # Open Food Facts reports sodium in grams.
        sodium_per_100g=float(sodium) * 1000 if sodium is not None else None,
        serving_size=serving_size,
        serving_unit=serving_unit,
        image_url=product.get("image_url"),
        categories=categories,
    )
