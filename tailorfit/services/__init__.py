from .match_service import Rewriter, analyze_match, score_document, tailor_document
from .rewrite_llm import OpenAIRewriter, RewriteLLMError

__all__ = [
    "Rewriter",
    "analyze_match",
    "score_document",
    "tailor_document",
    "OpenAIRewriter",
    "RewriteLLMError",
]
