import asyncio
import os
import sys
import logging

# Add project root to path
sys.path.append(os.path.join(os.getcwd(), 'backend'))

from dotenv import load_dotenv
load_dotenv(os.path.join(os.getcwd(), 'backend', '.env'))

from src.api.dependencies import get_betmines_source, get_cache_service, get_match_analysis_service
from src.application.use_cases.live_predictions_use_case import GetLivePredictionsUseCase
from src.domain.exceptions import UpstreamFetchException

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def manual_warmup():
    logger.info("--- MANUAL LIVE WARMUP START ---")

    source = get_betmines_source()
    use_case = GetLivePredictionsUseCase(source, get_match_analysis_service())

    # Fills the live-scores entry and one fixture-info entry per live fixture
    try:
        predictions = await use_case.execute()
    except UpstreamFetchException as e:
        logger.error(f"Live feed unavailable: {e}")
        return

    for p in predictions:
        home = p.teams.home
        away = p.teams.away
        logger.info(
            f"{p.fixture_id} {home.name} {home.score}-{away.score} {away.name} "
            f"({p.status.minute}'): {p.prediction.recommended_bet} "
            f"[{p.prediction.confidence:.0%}] | {p.temporal_goal_probability.summary}"
        )

    logger.info(f"Cache: {get_cache_service().stats()}")
    logger.info("--- MANUAL LIVE WARMUP COMPLETE ---")

if __name__ == "__main__":
    asyncio.run(manual_warmup())
