from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_LEXICON_PATH = Path(__file__).with_name("lexicon.json")


def normalize_term(raw: str) -> str:
    return re.sub(r"\s+", " ", (raw or "").strip().lower())


@dataclass(frozen=True)
class Lexicon:
    """Versioned, read-only word lists used by the matching engine.

    ``synonyms`` maps each canonical term to its alternate surface forms.
    ``fallback_terms`` backfill thin requirement texts and ``action_verbs``
    mark evidence sentences in the experience section.
    """

    version: str
    synonyms: Mapping[str, tuple[str, ...]]
    stopwords: frozenset[str] = frozenset()
    fallback_terms: tuple[str, ...] = ()
    action_verbs: tuple[str, ...] = ()
    _reverse: Mapping[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)
    joined_tokens: frozenset[str] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        synonyms: dict[str, tuple[str, ...]] = {}
        reverse: dict[str, str] = {}
        for key, forms in self.synonyms.items():
            canonical = normalize_term(key)
            if not canonical:
                continue
            clean_forms = tuple(
                form for form in dict.fromkeys(normalize_term(item) for item in forms) if form and form != canonical
            )
            synonyms[canonical] = clean_forms
            reverse.setdefault(canonical, canonical)
            for form in clean_forms:
                # First canonical key wins when two keys list the same form.
                reverse.setdefault(form, canonical)

        object.__setattr__(self, "synonyms", MappingProxyType(synonyms))
        object.__setattr__(self, "_reverse", MappingProxyType(reverse))
        object.__setattr__(self, "stopwords", frozenset(normalize_term(w) for w in self.stopwords if w))
        object.__setattr__(
            self, "fallback_terms", tuple(t for t in (normalize_term(x) for x in self.fallback_terms) if t)
        )
        object.__setattr__(
            self, "action_verbs", tuple(v for v in (normalize_term(x) for x in self.action_verbs) if v)
        )
        # Slash-joined words such as "ci/cd" are kept whole by the tokenizer.
        phrases = [*synonyms, *(form for forms in synonyms.values() for form in forms), *self.fallback_terms]
        object.__setattr__(
            self, "joined_tokens", frozenset(word for phrase in phrases for word in phrase.split() if "/" in word)
        )

    def canonical_for(self, term: str) -> str | None:
        return self._reverse.get(normalize_term(term))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Lexicon":
        synonyms = raw.get("synonyms") or {}
        if not isinstance(synonyms, Mapping):
            raise RuntimeError("Lexicon 'synonyms' must be a mapping of term -> list of forms.")
        return cls(
            version=str(raw.get("version") or "unversioned"),
            synonyms={str(key): tuple(str(v) for v in (value or [])) for key, value in synonyms.items()},
            stopwords=frozenset(str(w) for w in raw.get("stopwords") or []),
            fallback_terms=tuple(str(t) for t in raw.get("fallback_terms") or []),
            action_verbs=tuple(str(v) for v in raw.get("action_verbs") or []),
        )


def load_lexicon(path: str | Path | None = None) -> Lexicon:
    lexicon_path = Path(path) if path else DEFAULT_LEXICON_PATH
    try:
        with lexicon_path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except OSError as exc:
        raise RuntimeError(f"Failed to read lexicon '{lexicon_path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid JSON in lexicon '{lexicon_path}': {exc}") from exc

    if not isinstance(raw, dict):
        raise RuntimeError(f"Invalid lexicon '{lexicon_path}': expected a top-level object.")
    return Lexicon.from_mapping(raw)
