from .match_scorer import match_strength, placement_score, score_match
from .placement_planner import plan_placements
from .segmenter import HEADER_GRAMMAR, locate_sections, segment_document
from .term_miner import mine_keywords

__all__ = [
    "mine_keywords",
    "HEADER_GRAMMAR",
    "locate_sections",
    "segment_document",
    "match_strength",
    "placement_score",
    "score_match",
    "plan_placements",
]
