import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Tuple

from guess_that.data_objects import Card
from guess_that.resources import load_resource
from guess_that.text_norm import normalize

LOG = logging.getLogger(__name__)


class SafetyFilter:
    """Profanity screen built once at startup from a word list.

    Instances are immutable; an empty word list lets every card through.
    """

    def __init__(self, words: Iterable[str] = ()):
        self._words: Tuple[str, ...] = tuple(
            w.strip() for w in words if w and w.strip()
        )
        self._pattern: Optional[re.Pattern] = None
        if self._words:
            self._pattern = re.compile(
                "|".join(re.escape(w) for w in self._words), re.IGNORECASE
            )

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    @property
    def is_permissive(self) -> bool:
        return self._pattern is None

    @classmethod
    def from_text(cls, content: str) -> "SafetyFilter":
        return cls(content.splitlines())

    @classmethod
    def from_resource(
        cls, filename: str, base_dir: Optional[Path] = None
    ) -> "SafetyFilter":
        """Load the word list; on failure fall back to an empty, permissive filter."""
        try:
            content = load_resource(filename, base_dir=base_dir)
        except Exception as e:
            LOG.warning(
                "Profanity list '%s' could not be loaded, safety filter is "
                "permissive: %s",
                filename,
                e,
            )
            return cls()

        safety = cls.from_text(content)
        LOG.info("Profanity list loaded: %d entries", len(safety.words))
        return safety

    def contains_profanity(self, text: Optional[str]) -> bool:
        if self._pattern is None or not text:
            return False
        return self._pattern.search(text) is not None

    def is_family_friendly(self, card: Card) -> bool:
        if self.contains_profanity(card.target):
            return False
        return not any(self.contains_profanity(word) for word in card.forbidden or [])


def passes_stem_exclusion(card: Card) -> bool:
    """Reject cards where a forbidden word contains the target or vice versa.

    Both sides are compared in normalized form.
    """
    target = normalize(card.target)
    for word in card.forbidden or []:
        normalized_word = normalize(word)
        if normalized_word in target or target in normalized_word:
            return False
    return True
