from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Callable

_TOKEN_CLEAN_RE = re.compile(r"[^a-z0-9+#./\- ]+")
_RUN_BREAK_RE = re.compile(r"[,;:()\[\]{}|!?\"]+|\.(?=\s|$)")
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s+")
_EXPERIENCE_SENTENCE_RE = re.compile(r"\n+|(?<=\.)\s+(?=[A-Z])")
_DIGITS_OR_LETTER_RE = re.compile(r"^(?:[0-9][0-9+.#\-]*|[a-z])$")


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line or "").strip()


def split_units(text: str) -> list[str]:
    """Split requirement text into non-empty lines, then into sentences."""
    units: list[str] = []
    for line in (text or "").splitlines():
        stripped = normalize_line(line)
        if not stripped:
            continue
        for sentence in _SENTENCE_BREAK_RE.split(stripped):
            sentence = sentence.strip()
            if sentence:
                units.append(sentence)
    return units


def split_sentences(text: str) -> list[str]:
    return [part.strip() for part in _EXPERIENCE_SENTENCE_RE.split(text or "") if part and part.strip()]


def _clean_token(token: str) -> str:
    return token.strip("./-")


def token_runs(
    text: str,
    is_stopword: Callable[[str], bool],
    joined_tokens: frozenset[str] = frozenset(),
) -> list[list[str]]:
    """Return runs of content tokens; punctuation and stopwords end a run.

    A ``/`` also ends a run unless the whole slash-joined token is listed in
    ``joined_tokens`` (``ci/cd``, ``a/b``), in which case it stays one token.
    """
    runs: list[list[str]] = []
    for chunk in _RUN_BREAK_RE.split((text or "").lower()):
        cleaned = _TOKEN_CLEAN_RE.sub(" ", chunk)
        current: list[str] = []
        for raw in cleaned.split():
            token = _clean_token(raw)
            pieces = [token] if "/" not in token or token in joined_tokens else token.split("/")
            for position, piece in enumerate(pieces):
                piece = _clean_token(piece)
                if position > 0 or not piece or is_stopword(piece):
                    if current:
                        runs.append(current)
                        current = []
                if piece and not is_stopword(piece):
                    current.append(piece)
        if current:
            runs.append(current)
    return runs


def ngrams(tokens: list[str], max_n: int = 3) -> list[str]:
    out: list[str] = []
    for index in range(len(tokens)):
        for n in range(1, max_n + 1):
            if index + n > len(tokens):
                break
            out.append(" ".join(tokens[index : index + n]))
    return out


def is_valid_gram(gram: str, is_stopword: Callable[[str], bool]) -> bool:
    if not gram or len(gram) < 2:
        return False
    if is_stopword(gram):
        return False
    return not all(_DIGITS_OR_LETTER_RE.match(token) for token in gram.split())


@lru_cache(maxsize=2048)
def phrase_pattern(phrase: str) -> re.Pattern[str]:
    escaped = r"\s+".join(re.escape(part) for part in phrase.lower().split())
    return re.compile(rf"(?<![a-z0-9]){escaped}(?![a-z0-9])")


def phrase_in(text_lower: str, phrase: str) -> bool:
    if not phrase.strip():
        return False
    return bool(phrase_pattern(phrase).search(text_lower))


def count_phrase(text_lower: str, phrase: str) -> int:
    if not phrase.strip():
        return 0
    return len(phrase_pattern(phrase).findall(text_lower))


def head_word(term: str) -> str:
    parts = term.lower().split()
    return parts[0] if parts else ""


def stem(word: str) -> str:
    for suffix in ("ing", "ed", "es", "s"):
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            return word[: -len(suffix)]
    return word


def stem_in(text_lower: str, term: str) -> bool:
    root = stem(head_word(term))
    if len(root) < 2:
        return False
    pattern = rf"(?<![a-z0-9]){re.escape(root)}(?:s|es|e|ed|ing|er)?(?![a-z0-9])"
    return bool(re.search(pattern, text_lower))


def word_count(text: str) -> int:
    return len((text or "").split())


def quantile(values: list[float], q: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    position = (len(ordered) - 1) * q
    base = math.floor(position)
    rest = position - base
    if base + 1 < len(ordered):
        return ordered[base] + rest * (ordered[base + 1] - ordered[base])
    return ordered[base]
