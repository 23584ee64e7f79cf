"""Partition of two products' ingredient flags into shared and unique sets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scanscore.schemas.enums import HazardLevel


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scanscore.schemas.scan import IngredientFlag


@dataclass(frozen=True, slots=True)
class FlagPartition:
    """Disjoint flag lists; together they cover every distinct term of both products.

    ``shared`` holds product1's flag for each shared term and
    ``shared_in_product2`` holds product2's flag for the same term, index for
    index.
    """

    shared: tuple[IngredientFlag, ...] = ()
    unique_to_product1: tuple[IngredientFlag, ...] = ()
    unique_to_product2: tuple[IngredientFlag, ...] = ()
    shared_in_product2: tuple[IngredientFlag, ...] = ()

    def concerning(self) -> FlagPartition:
        """The same partition restricted to non-green flags.

        A shared term is concerning when either product flags it non-green.
        It keeps product1's term, with the level and explanation of the
        product that raised the concern.
        """
        shared: list[IngredientFlag] = []
        counterparts: list[IngredientFlag] = []
        for index, flag in enumerate(self.shared):
            counterpart = (
                self.shared_in_product2[index] if index < len(self.shared_in_product2) else flag
            )
            if flag.level != HazardLevel.GREEN:
                shared.append(flag)
            elif counterpart.level != HazardLevel.GREEN:
                shared.append(counterpart.model_copy(update={"term": flag.term}))
            else:
                continue
            counterparts.append(counterpart)

        return FlagPartition(
            shared=tuple(shared),
            unique_to_product1=_non_green(self.unique_to_product1),
            unique_to_product2=_non_green(self.unique_to_product2),
            shared_in_product2=tuple(counterparts),
        )


def _non_green(flags: Iterable[IngredientFlag]) -> tuple[IngredientFlag, ...]:
    return tuple(flag for flag in flags if flag.level != HazardLevel.GREEN)


def reconcile_flags(
    flags1: Sequence[IngredientFlag],
    flags2: Sequence[IngredientFlag],
) -> FlagPartition:
    """Split flags by case-insensitive, trimmed term.

    Shared and product1-only flags keep product1's order of first appearance,
    product2-only flags keep product2's. A shared term is represented by
    product1's flag; product2's first flag for it is kept alongside. Duplicate
    terms within one product are collapsed.
    """
    first2: dict[str, IngredientFlag] = {}
    for flag in flags2:
        first2.setdefault(flag.match_key, flag)

    shared: list[IngredientFlag] = []
    shared2: list[IngredientFlag] = []
    unique1: list[IngredientFlag] = []
    seen: set[str] = set()
    for flag in flags1:
        key = flag.match_key
        if key in seen:
            continue
        seen.add(key)
        if key in first2:
            shared.append(flag)
            shared2.append(first2[key])
        else:
            unique1.append(flag)

    unique2: list[IngredientFlag] = []
    for flag in flags2:
        key = flag.match_key
        if key in seen:
            continue
        seen.add(key)
        unique2.append(flag)

    return FlagPartition(
        shared=tuple(shared),
        unique_to_product1=tuple(unique1),
        unique_to_product2=tuple(unique2),
        shared_in_product2=tuple(shared2),
    )
