"""In-memory stand-ins for the asyncpg repositories."""

import asyncio

import pytest

from achievements.aggregator import ViewerMetricsAggregator
from achievements.errors import StorageUninitialized
from achievements.models import Achievement
from achievements.service import AchievementService
from services.achievement_events_service import AchievementEventsService


class FakeAchievementRepository:
    def __init__(self):
        self.initialized = True
        self.achievements = []
        self.unlocks = {}
        self.insert_calls = 0
        # number of concurrent ledger reads to hold until all have read
        self.reads_to_hold = 0
        self._reads = 0
        self._reads_done = None

    def _check(self):
        if not self.initialized:
            raise StorageUninitialized('relation "achievements" does not exist')

    def add(self, id, criteria, name=None, disabled=False, description=""):
        a = Achievement(
            id=id,
            name=name or f"achievement-{id}",
            description=description,
            disabled=disabled,
            criteria=criteria,
        )
        self.achievements.append(a)
        return a

    async def list_active_achievements(self):
        self._check()
        return sorted((a for a in self.achievements if not a.disabled), key=lambda a: a.id)

    async def get_unlocked_pairs(self, viewer_ids, achievement_ids):
        self._check()
        viewer_ids, achievement_ids = set(viewer_ids), set(achievement_ids)
        pairs = {k for k in self.unlocks if k[0] in viewer_ids and k[1] in achievement_ids}

        if self.reads_to_hold:
            if self._reads_done is None:
                self._reads_done = asyncio.Event()
            self._reads += 1
            if self._reads >= self.reads_to_hold:
                self._reads_done.set()
            await self._reads_done.wait()

        return pairs

    async def insert_unlock_if_absent(self, viewer_id, achievement_id, unlocked_at_ms, source, source_ref):
        self._check()
        self.insert_calls += 1
        key = (viewer_id, achievement_id)
        if key in self.unlocks:
            return False
        self.unlocks[key] = {
            "unlocked_at_ms": unlocked_at_ms,
            "source": source,
            "source_ref": source_ref,
        }
        return True

    async def get_unlock_times(self, viewer_id):
        self._check()
        return {aid: row["unlocked_at_ms"] for (uid, aid), row in self.unlocks.items() if uid == viewer_id}

    async def list_unlocked_for_viewer(self, viewer_id):
        self._check()
        names = {a.id: a for a in self.achievements}
        rows = [
            {
                "achievementId": aid,
                "unlockedAtMs": row["unlocked_at_ms"],
                "name": names[aid].name,
                "description": names[aid].description,
            }
            for (uid, aid), row in self.unlocks.items()
            if uid == viewer_id
        ]
        return sorted(rows, key=lambda r: r["unlockedAtMs"], reverse=True)


class FakeViewerStatsRepository:
    def __init__(self):
        self.results = []
        self.actions = {}
        self.requested_action_keys = []

    def add_result(self, viewer_id, status="FINISHED", position=None):
        self.results.append({"viewer": viewer_id, "status": status, "position": position})

    async def fetch_race_stats(self, viewer_ids):
        out = {}
        for r in self.results:
            if r["viewer"] not in viewer_ids:
                continue
            s = out.setdefault(r["viewer"], {"races": 0, "finished": 0, "wins": 0, "dnf": 0})
            s["races"] += 1
            if r["status"] == "FINISHED":
                s["finished"] += 1
                if r["position"] == 1:
                    s["wins"] += 1
            else:
                s["dnf"] += 1
        return out

    async def fetch_action_counts(self, viewer_ids, action_keys):
        self.requested_action_keys.append(list(action_keys))
        out = {}
        for (uid, key), count in self.actions.items():
            if uid in viewer_ids and key in action_keys:
                out.setdefault(uid, {})[key] = count
        return out

    async def increment_action(self, viewer_id, action_key, now_ms):
        key = (viewer_id, action_key)
        self.actions[key] = self.actions.get(key, 0) + 1
        return self.actions[key]


@pytest.fixture
def achievement_repo():
    return FakeAchievementRepository()


@pytest.fixture
def stats_repo():
    return FakeViewerStatsRepository()


@pytest.fixture
def service(achievement_repo, stats_repo):
    return AchievementService(
        repository=achievement_repo,
        aggregator=ViewerMetricsAggregator(stats_repo),
        clock=lambda: 1_700_000_000_000,
    )


@pytest.fixture
def events(service, stats_repo):
    return AchievementEventsService(service, stats_repo, clock=lambda: 1_700_000_000_000)
