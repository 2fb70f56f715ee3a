"""Open Food Facts API client."""

from dataclasses import dataclass

import httpx

from meal_planner.services.food_search import ProductClient


@dataclass
class HttpxProductClient(ProductClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxProductClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        response = await self.http_client.get(
            f"{self.base_url}/product/{barcode}.json", timeout=15
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": 0, "code": barcode}
        response.raise_for_status()
        return response.json()

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by name."""
        response = await self.http_client.get(
            f"{self.base_url}/search",
            params={
                "search_terms": query,
                "page": page,
                "page_size": page_size,
                "json": "true",
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
