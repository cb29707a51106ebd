import logging
from contextlib import asynccontextmanager

from tailorfit.core.scoring import load_scoring_config
from tailorfit.taxonomy import get_default_taxonomy_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Fail fast on a bad scoring config or lexicon.
    config = load_scoring_config()
    taxonomy = get_default_taxonomy_provider()
    logger.info(
        "engine_warmup scoring_config=%s lexicon=%s synonyms=%s",
        config.version,
        taxonomy.lexicon.version,
        len(taxonomy.lexicon.synonyms),
    )
    yield
