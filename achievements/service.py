# achievements/service.py

import logging
import time
from typing import Iterable, List

from .aggregator import unique_viewer_ids
from .criteria import criteria_satisfied, parse_criteria, referenced_action_keys, unknown_metrics
from .errors import AchievementError, InvalidViewerId, StorageUninitialized
from .models import Achievement, CompiledAchievement, NewUnlock
from .progress import clamp01, clause_progress, metric_label

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class AchievementService:
    def __init__(self, repository, aggregator, clock=now_ms):
        self.repo = repository
        self.aggregator = aggregator
        self.clock = clock

    # -----------------------------------------
    # Catalog
    # -----------------------------------------
    async def list_active_achievements(self) -> List[Achievement]:
        return await self.repo.list_active_achievements()

    async def list_unlocked_for_viewer(self, viewer_id: str) -> List[dict]:
        uid = str(viewer_id or "").strip()
        if not uid:
            raise InvalidViewerId("Viewer user id is required.")
        return await self.repo.list_unlocked_for_viewer(uid)

    def compile(self, achievements: Iterable[Achievement], warn: bool = True) -> List[CompiledAchievement]:
        compiled = []
        for a in achievements:
            if not a.id:
                continue

            try:
                clauses = parse_criteria(a.criteria)
            except AchievementError as e:
                if warn:
                    logger.warning(
                        f"⚠️ [ACH-PARSE] Achievement {a.id} ({a.name!r}) skipped: {e.message}"
                    )
                continue

            unknown = unknown_metrics(clauses)
            if unknown and warn:
                logger.warning(
                    f"⚠️ [ACH-METRIC] Achievement {a.id} ({a.name!r}) references "
                    f"unknown metrics {unknown}; they evaluate as 0"
                )

            compiled.append(CompiledAchievement(achievement=a, clauses=clauses))
        return compiled

    # -----------------------------------------
    # Award newly satisfied achievements
    # -----------------------------------------
    async def award_for_viewers(
        self,
        viewer_ids: Iterable[str],
        source: str = "",
        source_ref: str = "",
    ) -> List[NewUnlock]:
        ids = unique_viewer_ids(viewer_ids)
        if not ids:
            return []

        try:
            return await self._award(ids, str(source or ""), str(source_ref or ""))
        except StorageUninitialized as e:
            logger.warning(f"⚠️ [ACH-AWARD] Achievement tables missing, nothing awarded: {e}")
            return []

    async def _award(self, ids: List[str], source: str, source_ref: str) -> List[NewUnlock]:
        compiled = self.compile(await self.list_active_achievements())
        if not compiled:
            return []

        action_keys = set()
        for a in compiled:
            action_keys |= referenced_action_keys(a.clauses)

        snapshots = await self.aggregator.snapshots(ids, action_keys)
        existing = await self.repo.get_unlocked_pairs(ids, [a.id for a in compiled])

        unlocked_at = self.clock()
        unlocked = []

        for uid in ids:
            snapshot = snapshots[uid]

            for a in compiled:
                if (uid, a.id) in existing:
                    continue

                if not criteria_satisfied(a.clauses, snapshot):
                    continue

                inserted = await self.repo.insert_unlock_if_absent(
                    uid, a.id, unlocked_at, source, source_ref
                )
                if not inserted:
                    continue

                existing.add((uid, a.id))
                unlocked.append(NewUnlock(
                    viewer_user_id=uid,
                    achievement_id=a.id,
                    achievement_name=a.name,
                    unlocked_at_ms=unlocked_at,
                ))

                logger.info(
                    f"🏆 [ACH-AWARD] Viewer {uid} unlocked achievement {a.id} ({a.name!r}) "
                    f"source={source or '-'} ref={source_ref or '-'}"
                )

        if unlocked:
            logger.info(
                f"🏁 [ACH-AWARD] {len(unlocked)} new unlock(s) for {len(ids)} viewer(s)"
            )
        return unlocked

    # -----------------------------------------
    # Progress breakdown for a single viewer (read-only)
    # -----------------------------------------
    async def progress_for_viewer(self, viewer_id: str) -> dict:
        uid = str(viewer_id or "").strip()
        if not uid:
            raise InvalidViewerId("Viewer user id is required.")

        compiled = self.compile(await self.list_active_achievements(), warn=False)

        action_keys = set()
        for a in compiled:
            action_keys |= referenced_action_keys(a.clauses)

        snapshot = (await self.aggregator.snapshots([uid], action_keys))[uid]
        unlock_times = await self.repo.get_unlock_times(uid)

        return {
            "viewerUserId": uid,
            "metrics": snapshot.to_dict(),
            "achievements": [
                self._achievement_progress(a, snapshot, unlock_times.get(a.id, 0))
                for a in compiled
            ],
        }

    def _achievement_progress(self, compiled: CompiledAchievement, snapshot, unlocked_at_ms: int) -> dict:
        requirements = []
        for clause in compiled.clauses:
            ref = clause.ref
            current = clause.current(snapshot)
            requirements.append({
                "metric": ref.canonical,
                "metricLabel": metric_label(ref.canonical),
                "op": clause.op,
                "target": clause.threshold,
                "current": current,
                "satisfied": clause.holds(snapshot),
                "progress01": clause_progress(current, clause.op, clause.threshold),
            })

        eligible_now = all(r["satisfied"] for r in requirements)

        if unlocked_at_ms > 0 or eligible_now:
            overall = 1.0
        else:
            overall = clamp01(sum(r["progress01"] for r in requirements) / len(requirements))

        a = compiled.achievement
        return {
            "id": a.id,
            "name": a.name,
            "description": a.description,
            "criteria": a.criteria,
            "unlockedAtMs": unlocked_at_ms,
            "eligibleNow": eligible_now,
            "overallProgress01": overall,
            "hasAnyProgress": any(r["progress01"] > 0 for r in requirements),
            "requirementsSatisfied": sum(1 for r in requirements if r["satisfied"]),
            "requirementsTotal": len(requirements),
            "requirements": requirements,
        }
