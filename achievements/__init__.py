from .aggregator import ViewerMetricsAggregator
from .repository import AchievementRepository
from .service import AchievementService


async def setup_achievements(pool=None):
    from database import get_pool
    from repositories.viewer_stats_repository import ViewerStatsRepository

    if pool is None:
        pool = await get_pool()

    return AchievementService(
        repository=AchievementRepository(pool),
        aggregator=ViewerMetricsAggregator(ViewerStatsRepository(pool)),
    )
