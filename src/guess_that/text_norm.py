import unicodedata
from typing import Optional


def _strip_marks(text: str) -> str:
    return "".join(ch for ch in text if not unicodedata.category(ch).startswith("M"))


def normalize(text: Optional[str]) -> str:
    """Canonical form used for stem comparisons and the storage uniqueness key.

    NFKC, lowercased, combining marks removed, trimmed. ``None`` becomes "".
    """
    if text is None:
        return ""
    # Lowercase before dropping marks: str.lower() can emit combining marks
    # (e.g. "İ" -> "i̇"), which must not survive into the result.
    lowered = unicodedata.normalize("NFKC", text).lower()
    bare = _strip_marks(unicodedata.normalize("NFKD", lowered))
    return unicodedata.normalize("NFKC", bare).strip()
