from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tailorfit.schemas.match import SECTION_NAMES, DocumentSections, SectionName, SectionSlice

logger = logging.getLogger(__name__)

HEADER_GRAMMAR: dict[SectionName, tuple[str, ...]] = {
    "summary": ("professional summary", "summary", "objective", "profile", "about me", "about"),
    "experience": (
        "professional experience",
        "work experience",
        "employment history",
        "career history",
        "experience",
        "employment",
        "roles",
        "career",
    ),
    "skills": ("technical skills", "core skills", "skills", "skill", "tooling", "technologies"),
}


def _header_pattern(synonyms: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(item) for item in synonyms)
    return re.compile(
        rf"^[ \t]*(?:#{{1,6}}[ \t]*)?(?:{alternatives})[ \t]*(?::(?P<inline>[^\n]*))?[ \t]*$",
        re.IGNORECASE | re.MULTILINE,
    )


_HEADER_PATTERNS: dict[SectionName, re.Pattern[str]] = {
    section: _header_pattern(synonyms) for section, synonyms in HEADER_GRAMMAR.items()
}


@dataclass(frozen=True)
class _HeaderHit:
    section: SectionName
    start: int
    body_start: int


def _find_headers(text: str) -> list[_HeaderHit]:
    hits: list[_HeaderHit] = []
    for section, pattern in _HEADER_PATTERNS.items():
        match = pattern.search(text)
        if match is None:
            continue
        inline_start = match.start("inline") if match.group("inline") is not None else match.end()
        hits.append(_HeaderHit(section=section, start=match.start(), body_start=inline_start))
    hits.sort(key=lambda hit: hit.start)
    return hits


def locate_sections(text: str) -> dict[SectionName, SectionSlice]:
    """Apply the header grammar and tag every section as found or not.

    Only the first header of each section counts; a body runs from its header
    to the next located header in document order.
    """
    source = (text or "").replace("\r\n", "\n")
    hits = _find_headers(source)
    slices: dict[SectionName, SectionSlice] = {
        section: SectionSlice(found=False, body="") for section in SECTION_NAMES
    }
    for position, hit in enumerate(hits):
        end = hits[position + 1].start if position + 1 < len(hits) else len(source)
        slices[hit.section] = SectionSlice(found=True, body=source[hit.body_start:end].strip())
    return slices


def segment_document(text: str) -> DocumentSections:
    """Split a candidate document into summary, experience and skills bodies.

    Missing headers fall back explicitly: without an experience header the text
    before the skills header (or the whole document) becomes experience, and a
    missing summary or skills header yields an empty body.
    """
    source = (text or "").replace("\r\n", "\n")
    slices = locate_sections(source)

    experience = slices["experience"]
    if not experience.found:
        skills_hit = next((hit for hit in _find_headers(source) if hit.section == "skills"), None)
        end = skills_hit.start if skills_hit is not None else len(source)
        experience = SectionSlice(found=False, body=source[:end].strip())
        logger.debug("experience_header_missing fallback_chars=%s", len(experience.body))

    headers_found = [section for section in SECTION_NAMES if slices[section].found]
    return DocumentSections(
        summary=slices["summary"].body,
        experience=experience.body,
        skills=slices["skills"].body,
        headers_found=headers_found,
    )
