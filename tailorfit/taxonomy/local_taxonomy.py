from __future__ import annotations

from pathlib import Path

from .lexicon import Lexicon, load_lexicon, normalize_term
from .provider import TaxonomyProvider


class LocalTaxonomy(TaxonomyProvider):
    def __init__(self, lexicon_path: str | Path | None = None, *, lexicon: Lexicon | None = None) -> None:
        self._lexicon = lexicon if lexicon is not None else load_lexicon(lexicon_path)

    @classmethod
    def from_lexicon(cls, lexicon: Lexicon) -> "LocalTaxonomy":
        return cls(lexicon=lexicon)

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def canonicalize(self, raw: str) -> str:
        normalized = normalize_term(raw)
        return self._lexicon.canonical_for(normalized) or normalized

    def surface_forms(self, term: str) -> tuple[str, ...]:
        return self._lexicon.synonyms.get(normalize_term(term), ())

    def is_stopword(self, token: str) -> bool:
        return token in self._lexicon.stopwords
