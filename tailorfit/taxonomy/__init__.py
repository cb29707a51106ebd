from functools import lru_cache

from tailorfit.core.config import settings

from .lexicon import Lexicon
from .local_taxonomy import LocalTaxonomy
from .provider import TaxonomyProvider


@lru_cache(maxsize=1)
def get_default_taxonomy_provider() -> TaxonomyProvider:
    return LocalTaxonomy(settings.lexicon_path)


__all__ = ["Lexicon", "TaxonomyProvider", "LocalTaxonomy", "get_default_taxonomy_provider"]
