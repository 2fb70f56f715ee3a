"""Manual barcode entry and product lookup."""

from dataclasses import dataclass

from meal_planner.domain.products import Product
from meal_planner.errors import InvalidBarcodeError
from meal_planner.services.food_search import FoodSearchService

_GTIN_LENGTHS = {8, 12, 13, 14}


def normalize_barcode(raw: str) -> str:
    """Return a typed GTIN stripped of spaces after checking its digit."""
    code = "".join(raw.split())
    if not code.isdigit() or len(code) not in _GTIN_LENGTHS:
        raise InvalidBarcodeError(
            f"Barcode must be 8, 12, 13 or 14 digits, got {raw!r}"
        )
    if gtin_check_digit(code[:-1]) != int(code[-1]):
        raise InvalidBarcodeError(f"Barcode {code} has an invalid check digit")
    return code


def gtin_check_digit(payload: str) -> int:
    """Compute the GS1 check digit for the digits preceding it."""
    total = 0
    for position, char in enumerate(reversed(payload)):
        weight = 3 if position % 2 == 0 else 1
        total += int(char) * weight
    return (10 - total % 10) % 10


@dataclass
class BarcodeService:
    """Looks up manually entered barcodes."""

    food_search: FoodSearchService

    async def lookup(self, raw: str) -> Product | None:
        """Validate a barcode and fetch the matching product, if any."""
        return await self.food_search.by_barcode(normalize_barcode(raw))
