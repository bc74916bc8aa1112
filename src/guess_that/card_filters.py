"""Validation and in-batch deduplication of generated cards.

``filter_batch`` runs the predicates below in a fixed order; later checks
rely on earlier ones (dedup assumes a non-blank target, the safety checks
assume a non-empty forbidden list).

Two dedup guards exist on purpose and use different casing rules:

* ``is_new_target`` compares ``str.casefold()`` forms (full Unicode case
  folding, so "Straße" and "STRASSE" collide);
* ``mark_seen`` compares ``str.lower()`` forms.

Neither depends on the process locale.
"""

from itertools import islice
from typing import Iterable, List, Optional, Set

from guess_that.data_objects import MAX_FORBIDDEN_WORDS, Card
from guess_that.safety_filters import SafetyFilter, passes_stem_exclusion


def is_present(card: Optional[Card]) -> bool:
    return card is not None


def matches_language(card: Card, language: str) -> bool:
    return (card.language or "").casefold() == (language or "").casefold()


def has_target(card: Card) -> bool:
    return bool(card.target and card.target.strip())


def is_new_target(card: Card, accepted: Set[str]) -> bool:
    return card.target.casefold() not in accepted


def has_forbidden(card: Card) -> bool:
    return bool(card.forbidden)


def within_forbidden_limit(card: Card) -> bool:
    return len(card.forbidden) <= MAX_FORBIDDEN_WORDS


def mark_seen(card: Card, seen: Set[str]) -> bool:
    """Record the lowercased target; False if it was already recorded."""
    key = card.target.lower()
    if key in seen:
        return False
    seen.add(key)
    return True


def _surviving(
    cards: Iterable[Optional[Card]], language: str, safety: SafetyFilter
) -> Iterable[Card]:
    accepted: Set[str] = set()
    seen: Set[str] = set()
    for card in cards:
        if not (
            is_present(card)
            and matches_language(card, language)
            and has_target(card)
            and is_new_target(card, accepted)
            and has_forbidden(card)
            and within_forbidden_limit(card)
            and safety.is_family_friendly(card)
            and passes_stem_exclusion(card)
            and mark_seen(card, seen)
        ):
            continue
        accepted.add(card.target.casefold())
        yield card


def filter_batch(
    cards: Iterable[Optional[Card]],
    language: str,
    count: int,
    safety: SafetyFilter,
) -> List[Card]:
    """Return at most ``count`` valid, safe, unique cards in their original order."""
    if count <= 0:
        return []
    return list(islice(_surviving(cards, language, safety), count))
