# services/achievement_events_service.py
import logging

from achievements.service import now_ms


class AchievementEventsService:
    """Entry points for events that can change a viewer's metrics."""

    def __init__(self, achievement_service, stats_repository, clock=now_ms):
        self.achievements = achievement_service
        self.stats_repo = stats_repository
        self.clock = clock

    # -----------------------------------------
    # 🎯 Tracked website action (counter + award pass)
    # -----------------------------------------
    async def record_action(self, viewer_id: str, action_key: str) -> dict:
        uid = str(viewer_id or "").strip()
        key = str(action_key or "").strip()
        if not uid or not key:
            return {"ok": False, "skipped": True, "reason": "missing_input"}

        at_ms = self.clock()
        count = await self.stats_repo.increment_action(uid, key, at_ms)

        logging.info(f"🎯 [ACH-ACTION] Viewer {uid} action {key!r} -> {count}")

        try:
            unlocked = await self.achievements.award_for_viewers(
                [uid], source="action", source_ref=key
            )
        except Exception:
            logging.exception(
                f"❌ [ACH-AWARD] Award pass failed after action {key!r} for viewer {uid}"
            )
            unlocked = []

        return {
            "ok": True,
            "viewerUserId": uid,
            "actionKey": key,
            "count": count,
            "atMs": at_ms,
            "achievementsUnlocked": [u.to_dict() for u in unlocked],
        }

    # -----------------------------------------
    # 🏁 Race results saved (best-effort)
    # -----------------------------------------
    async def award_for_race(self, competition_id, viewer_ids) -> list:
        try:
            unlocked = await self.achievements.award_for_viewers(
                viewer_ids, source="competition", source_ref=str(competition_id or "")
            )
        except Exception:
            logging.exception(
                f"❌ [ACH-AWARD] Award pass failed for competition {competition_id}"
            )
            return []

        return [u.to_dict() for u in unlocked]
