"""Open Food Facts API client package.

Barcode lookup for product analysis, name search for alternative images and
nutrition enrichment of compared products.
"""

from scanscore.clients.open_food_facts.client import (
    OpenFoodFactsClient,
    OpenFoodFactsProduct,
    parse_nutriments,
)
from scanscore.clients.open_food_facts.exceptions import (
    OpenFoodFactsError,
    OpenFoodFactsUnavailableError,
)


__all__ = [
    "OpenFoodFactsClient",
    "OpenFoodFactsError",
    "OpenFoodFactsProduct",
    "OpenFoodFactsUnavailableError",
    "parse_nutriments",
]
