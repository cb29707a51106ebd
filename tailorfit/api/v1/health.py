from fastapi import APIRouter

from tailorfit.core.scoring import load_scoring_config
from tailorfit.taxonomy import get_default_taxonomy_provider

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {
        "status": "healthy",
        "scoring_config_version": load_scoring_config().version,
        "lexicon_version": get_default_taxonomy_provider().lexicon.version,
    }
