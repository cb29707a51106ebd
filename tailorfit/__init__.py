"""Deterministic resume-to-job-description matching engine.

Mines weighted keywords from a requirement text, segments a candidate
document, scores their alignment and plans keyword placements for a
separate rewriting step.
"""

from .services.match_service import analyze_match, tailor_document

__all__ = ["analyze_match", "tailor_document"]
