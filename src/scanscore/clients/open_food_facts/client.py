"""Open Food Facts API client.

Two access paths are used:

- ``GET /api/v2/product/{barcode}.json`` for barcode scans. Failures are
  raised so that the caller can tell "unknown barcode" from "service down".
- ``GET /cgi/search.pl`` by product name (+ brand) for best-effort image and
  nutrition lookups. Failures are logged and reported as ``None``.

Successful lookups are cached in Redis as orjson documents.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Final

import httpx
import orjson
from redis.exceptions import RedisError

from scanscore.clients.open_food_facts.exceptions import OpenFoodFactsUnavailableError
from scanscore.observability.logging import get_logger
from scanscore.schemas.scan import NutritionData


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


# NutritionData field -> (nutriment key, multiplier)
NUTRIMENT_FIELDS: Final[dict[str, tuple[str, float]]] = {
    "calories": ("energy-kcal_100g", 1.0),
    "protein": ("proteins_100g", 1.0),
    "carbs": ("carbohydrates_100g", 1.0),
    "sugars": ("sugars_100g", 1.0),
    "fat": ("fat_100g", 1.0),
    "saturated_fat": ("saturated-fat_100g", 1.0),
    "fiber": ("fiber_100g", 1.0),
    "sodium": ("sodium_100g", 1000.0),  # g -> mg
}

PRODUCT_FIELDS: Final[str] = ",".join(
    (
        "code",
        "product_name",
        "brands",
        "categories",
        "ingredients_text",
        "image_front_url",
        "image_url",
        "nutriments",
    )
)


@dataclass(frozen=True, slots=True)
class OpenFoodFactsProduct:
    """Product data from Open Food Facts."""

    barcode: str
    product_name: str
    brand: str = ""
    categories: str = ""
    ingredients_text: str = ""
    image_url: str | None = None
    nutrition: NutritionData | None = None


def _as_str(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _round(value: float) -> float:
    return round(value, 2)


def parse_nutriments(nutriments: object) -> NutritionData | None:
    """Map an Open Food Facts ``nutriments`` object to ``NutritionData``.

    Returns None when none of the tracked nutrients is present.
    """
    if not isinstance(nutriments, dict):
        return None

    values: dict[str, float | None] = {}
    for field, (key, multiplier) in NUTRIMENT_FIELDS.items():
        raw = nutriments.get(key)
        try:
            values[field] = _round(float(raw) * multiplier) if raw is not None else None
        except (TypeError, ValueError):
            values[field] = None

    if all(value is None for value in values.values()):
        return None
    return NutritionData(**values)


def _parse_product(data: dict[str, Any], barcode: str = "") -> OpenFoodFactsProduct:
    brands = _as_str(data.get("brands"))
    return OpenFoodFactsProduct(
        barcode=_as_str(data.get("code")) or barcode,
        product_name=_as_str(data.get("product_name")),
        # "brands" is a comma separated list; the first entry is the owner
        brand=brands.split(",")[0].strip() if brands else "",
        categories=_as_str(data.get("categories")),
        ingredients_text=_as_str(data.get("ingredients_text")),
        image_url=_as_str(data.get("image_front_url")) or _as_str(data.get("image_url")) or None,
        nutrition=parse_nutriments(data.get("nutriments")),
    )


class OpenFoodFactsClient:
    """Async client for the Open Food Facts API."""

    DEFAULT_BASE_URL: Final[str] = "https://world.openfoodfacts.org"
    SEARCH_ENDPOINT: Final[str] = "/cgi/search.pl"
    CACHE_PREFIX: Final[str] = "off"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 10.0,
        user_agent: str = "ScanScore/0.1",
        cache_client: Redis[Any] | None = None,
        cache_ttl: int = 7 * 24 * 60 * 60,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self._cache = cache_client
        self._cache_ttl = cache_ttl
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": self.user_agent},
            )
        logger.info("OpenFoodFactsClient initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("OpenFoodFactsClient shutdown")

    async def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            await self.initialize()
        assert self._http is not None
        return self._http

    # =========================================================================
    # Barcode lookup
    # =========================================================================

    async def get_product(self, barcode: str) -> OpenFoodFactsProduct | None:
        """Fetch a product by barcode.

        Returns:
            The product, or None if Open Food Facts does not know the barcode.

        Raises:
            OpenFoodFactsUnavailableError: Transport failure or server error.
        """
        barcode = barcode.strip()
        cache_key = f"{self.CACHE_PREFIX}:product:{barcode}"
        cached = await self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        http = await self._client()
        try:
            response = await http.get(
                f"{self.base_url}/api/v2/product/{barcode}.json",
                params={"fields": PRODUCT_FIELDS},
            )
            if response.status_code == httpx.codes.NOT_FOUND:
                logger.info("Barcode not found in Open Food Facts", barcode=barcode)
                return None
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Open Food Facts product lookup failed", barcode=barcode, error=str(e))
            msg = f"Open Food Facts lookup failed: {e}"
            raise OpenFoodFactsUnavailableError(msg) from e

        if not isinstance(data, dict):
            data = {}
        product_data = data.get("product")
        if data.get("status") != 1 or not isinstance(product_data, dict):
            logger.info("Barcode not found in Open Food Facts", barcode=barcode)
            return None

        product = _parse_product(product_data, barcode)
        await self._save_to_cache(cache_key, product)
        return product

    # =========================================================================
    # Name search (best effort)
    # =========================================================================

    async def search_product(
        self,
        name: str,
        brand: str | None = None,
    ) -> OpenFoodFactsProduct | None:
        """Return the best search match for a product name, or None."""
        terms = " ".join(part for part in (brand, name) if part and part.strip()).strip()
        if not terms:
            return None

        cache_key = f"{self.CACHE_PREFIX}:search:{terms.lower()}"
        cached = await self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        http = await self._client()
        params = {
            "search_terms": terms,
            "search_simple": "1",
            "action": "process",
            "json": "1",
            "page_size": "1",
            "fields": PRODUCT_FIELDS,
        }
        try:
            response = await http.get(f"{self.base_url}{self.SEARCH_ENDPOINT}", params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Open Food Facts search failed", terms=terms, error=str(e))
            return None

        products = data.get("products") if isinstance(data, dict) else None
        if not products or not isinstance(products[0], dict):
            logger.debug("No Open Food Facts match", terms=terms)
            return None

        product = _parse_product(products[0])
        await self._save_to_cache(cache_key, product)
        return product

    async def find_product_image(self, name: str, brand: str | None = None) -> str | None:
        """Front image URL of the best match, or None."""
        product = await self.search_product(name, brand)
        return product.image_url if product else None

    async def find_nutrition(self, name: str, brand: str | None = None) -> NutritionData | None:
        """Nutrition facts of the best match, or None."""
        product = await self.search_product(name, brand)
        return product.nutrition if product else None

    # =========================================================================
    # Cache
    # =========================================================================

    async def _get_from_cache(self, key: str) -> OpenFoodFactsProduct | None:
        if self._cache is None:
            return None
        try:
            cached = await self._cache.get(key)
        except RedisError as e:
            logger.warning("Open Food Facts cache read failed", key=key, error=str(e))
            return None
        if not cached:
            return None
        logger.debug("Open Food Facts cache hit", key=key)
        return self._deserialize(cached)

    async def _save_to_cache(self, key: str, product: OpenFoodFactsProduct) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.setex(key, self._cache_ttl, self._serialize(product))
        except RedisError as e:
            logger.warning("Open Food Facts cache write failed", key=key, error=str(e))

    @staticmethod
    def _serialize(product: OpenFoodFactsProduct) -> bytes:
        payload = asdict(product)
        payload["nutrition"] = (
            product.nutrition.model_dump(by_alias=False) if product.nutrition else None
        )
        return orjson.dumps(payload)

    @staticmethod
    def _deserialize(data: bytes | str) -> OpenFoodFactsProduct:
        obj = orjson.loads(data)
        nutrition = obj.pop("nutrition", None)
        return OpenFoodFactsProduct(
            **obj,
            nutrition=NutritionData.model_validate(nutrition) if nutrition else None,
        )
