"""Classification of the oracle's chemical exposures against the flag partition.

The oracle supplies category and health implication text; where each
exposure is found is always derived from the partition.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from scanscore.observability.logging import get_logger
from scanscore.schemas.comparison import ChemicalExposureInfo
from scanscore.schemas.enums import ChemicalCategory, FoundIn


if TYPE_CHECKING:
    from collections.abc import Sequence

    from scanscore.llm.prompts.comparison import OracleExposure
    from scanscore.schemas.scan import IngredientFlag
    from scanscore.services.comparison.flags import FlagPartition

logger = get_logger(__name__)

_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_category(raw: str | None) -> ChemicalCategory | None:
    """Map "Artificial Coloring", "artificial-coloring", etc. to the enum."""
    if not raw:
        return None
    key = _SEPARATORS.sub("_", raw.strip().lower())
    try:
        return ChemicalCategory(key)
    except ValueError:
        return None


def _index_concerning(partition: FlagPartition) -> dict[str, tuple[IngredientFlag, FoundIn]]:
    concerning = partition.concerning()
    index: dict[str, tuple[IngredientFlag, FoundIn]] = {}
    for found_in, flags in (
        (FoundIn.BOTH, concerning.shared),
        (FoundIn.PRODUCT1, concerning.unique_to_product1),
        (FoundIn.PRODUCT2, concerning.unique_to_product2),
    ):
        for flag in flags:
            index.setdefault(flag.match_key, (flag, found_in))
    return index


def classify_exposures(
    partition: FlagPartition,
    oracle_exposures: Sequence[OracleExposure] | None,
) -> list[ChemicalExposureInfo]:
    """Keep the oracle exposures that name a concerning flag, in oracle order.

    Unknown terms are dropped, repeated terms keep their first entry, unknown
    categories become ``other`` and a blank health implication is replaced by
    the flag's own explanation. ``None`` (unparseable oracle output) yields [].
    """
    if not oracle_exposures:
        return []

    index = _index_concerning(partition)
    exposures: list[ChemicalExposureInfo] = []
    seen: set[str] = set()

    for proposed in oracle_exposures:
        key = proposed.term.strip().lower()
        match = index.get(key)
        if match is None:
            logger.debug("Dropping exposure for unflagged term", term=proposed.term)
            continue
        if key in seen:
            continue
        seen.add(key)

        flag, found_in = match
        if proposed.found_in and proposed.found_in != found_in:
            logger.debug(
                "Overriding oracle foundIn",
                term=flag.term,
                oracle_found_in=proposed.found_in,
                found_in=found_in.value,
            )

        category = normalize_category(proposed.category)
        if category is None:
            logger.warning(
                "Unknown exposure category, using 'other'",
                term=flag.term,
                category=proposed.category,
            )
            category = ChemicalCategory.OTHER

        exposures.append(
            ChemicalExposureInfo(
                term=flag.term,
                category=category,
                health_implication=proposed.health_implication.strip() or flag.explain,
                found_in=found_in,
            )
        )

    return exposures
