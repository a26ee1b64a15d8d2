from contextlib import asynccontextmanager
import logging

from cv_ats.core.scoring_config import get_scoring_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # An invalid scoring config raises BenchmarkConfigError and aborts startup.
    config = get_scoring_config()
    logger.info(
        "startup_complete industries=%s status_thresholds=%s/%s",
        len(config.benchmarks.industries),
        config.status_thresholds.default.excellent,
        config.status_thresholds.keywords.excellent,
    )
    yield
