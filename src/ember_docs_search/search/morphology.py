"""Singular/plural normalization for topic and query terms.

General inflection is delegated to ``inflect``; the override tables below are
the domain contract and always win over the general algorithm.

Example:
    - "components" -> "component"
    - "children" <-> "child"
    - "caches" -> "cache" (irregular for the general algorithm)
    - "data" stays "data" (uncountable)
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache

import inflect


# Forced plural -> singular mappings
SINGULAR_OVERRIDES: dict[str, str] = {
    "caches": "cache",
}

# Words whose singular and plural are the word itself
UNCOUNTABLE: frozenset[str] = frozenset(
    {
        "data",
        "metadata",
        "information",
        "feedback",
        "middleware",
        "software",
    }
)

_engine = inflect.engine()

# Endings inflect reads as plural "-s" although the word is singular (class, status, analysis)
SINGULAR_ENDINGS = ("ss", "us", "is")
MIN_STEM_LENGTH = 3


class Morphology:
    """Singular/plural conversion honoring domain overrides."""

    def __init__(
        self,
        singular_overrides: Mapping[str, str] | None = None,
        uncountable: frozenset[str] | None = None,
    ) -> None:
        self._singular = dict(SINGULAR_OVERRIDES if singular_overrides is None else singular_overrides)
        self._plural = {singular: plural for plural, singular in self._singular.items()}
        self._uncountable = UNCOUNTABLE if uncountable is None else uncountable

    def to_singular(self, word: str) -> str:
        """Singular form of a lowercase word (the word itself when already singular)."""
        if not word or word in self._uncountable:
            return word
        if word in self._singular:
            return self._singular[word]
        if word in self._plural:
            return word
        return _inflect_singular(word) or word

    def to_plural(self, word: str) -> str:
        """Plural form of a lowercase word (the word itself when already plural)."""
        if not word or word in self._uncountable:
            return word
        if word in self._plural:
            return self._plural[word]
        if word in self._singular:
            return word
        if _inflect_singular(word):
            return word
        return _engine.plural_noun(word)


def _inflect_singular(word: str) -> str | None:
    """inflect's singular, accepted only when pluralizing it gives the word back."""
    if word.endswith(SINGULAR_ENDINGS):
        return None
    singular = _engine.singular_noun(word)
    if not singular or singular == word or len(singular) < MIN_STEM_LENGTH:
        return None
    if _engine.plural_noun(singular) != word:
        return None
    return singular


_default = Morphology()


@lru_cache(maxsize=4096)
def to_singular(word: str) -> str:
    """Module-level singularization with the default override tables."""
    return _default.to_singular(word)


@lru_cache(maxsize=4096)
def to_plural(word: str) -> str:
    """Module-level pluralization with the default override tables."""
    return _default.to_plural(word)


def term_variants(word: str) -> tuple[str, ...]:
    """The word with its singular and plural forms."""
    forms = [word]
    for form in (to_singular(word), to_plural(word)):
        if form and form not in forms:
            forms.append(form)
    return tuple(forms)


def matches_any_form(term: str, text: str) -> bool:
    """True when the term, its singular or its plural is a substring of text."""
    return any(form in text for form in term_variants(term))
