# achievements/aggregator.py

from typing import Dict, Iterable, List

from .metrics import MetricSnapshot


def unique_viewer_ids(viewer_ids: Iterable) -> List[str]:
    """Trimmed, non-empty, case-sensitive ids in first-seen order."""
    out = []
    seen = set()
    for v in viewer_ids or []:
        s = str(v if v is not None else "").strip()
        if not s or s in seen:
            continue
        seen.add(s)
        out.append(s)
    return out


class ViewerMetricsAggregator:
    def __init__(self, stats_repository):
        self.stats_repo = stats_repository

    async def snapshots(
        self,
        viewer_ids: Iterable[str],
        action_keys: Iterable[str] = (),
    ) -> Dict[str, MetricSnapshot]:
        ids = unique_viewer_ids(viewer_ids)
        if not ids:
            return {}

        keys = sorted({k for k in action_keys if k})

        race_stats = await self.stats_repo.fetch_race_stats(ids)
        action_counts = await self.stats_repo.fetch_action_counts(ids, keys) if keys else {}

        out = {}
        for uid in ids:
            stats = race_stats.get(uid) or {}
            out[uid] = MetricSnapshot(
                races=int(stats.get("races", 0) or 0),
                finished=int(stats.get("finished", 0) or 0),
                wins=int(stats.get("wins", 0) or 0),
                dnf=int(stats.get("dnf", 0) or 0),
                actions=dict(action_counts.get(uid) or {}),
            )
        return out
