from __future__ import annotations

from typing import Protocol

from .lexicon import Lexicon


class TaxonomyProvider(Protocol):
    @property
    def lexicon(self) -> Lexicon: ...

    def canonicalize(self, raw: str) -> str:
        """Return the canonical term for a raw phrase, or the phrase itself."""

    def surface_forms(self, term: str) -> tuple[str, ...]:
        """Return the alternate surface forms registered for a canonical term."""

    def is_stopword(self, token: str) -> bool: ...
