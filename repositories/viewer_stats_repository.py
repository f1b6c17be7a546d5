# repositories/viewer_stats_repository.py

from typing import Dict, List

from achievements.repository import acquire


class ViewerStatsRepository:
    def __init__(self, pool):
        self.pool = pool

    # ------------------------------------------
    # Race results grouped per viewer
    # ------------------------------------------
    async def fetch_race_stats(self, viewer_ids: List[str]) -> Dict[str, dict]:
        if not viewer_ids:
            return {}

        query = """
        SELECT
            viewer_user_id,
            COUNT(*) AS races,
            COUNT(*) FILTER (WHERE status = 'FINISHED') AS finished,
            COUNT(*) FILTER (WHERE status = 'FINISHED' AND finish_position = 1) AS wins,
            COUNT(*) FILTER (WHERE status <> 'FINISHED') AS dnf
        FROM competition_results
        WHERE viewer_user_id = ANY($1::text[])
        GROUP BY viewer_user_id
        """
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(query, viewer_ids)

        return {
            row["viewer_user_id"]: {
                "races": row["races"] or 0,
                "finished": row["finished"] or 0,
                "wins": row["wins"] or 0,
                "dnf": row["dnf"] or 0,
            }
            for row in rows
        }

    # ------------------------------------------
    # Action counters, only for the requested keys
    # ------------------------------------------
    async def fetch_action_counts(
        self,
        viewer_ids: List[str],
        action_keys: List[str],
    ) -> Dict[str, Dict[str, int]]:
        if not viewer_ids or not action_keys:
            return {}

        query = """
        SELECT viewer_user_id, action_key, count
        FROM viewer_actions
        WHERE viewer_user_id = ANY($1::text[])
          AND action_key = ANY($2::text[])
        """
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(query, viewer_ids, action_keys)

        out: Dict[str, Dict[str, int]] = {}
        for row in rows:
            out.setdefault(row["viewer_user_id"], {})[row["action_key"]] = int(row["count"] or 0)
        return out

    async def increment_action(self, viewer_id: str, action_key: str, now_ms: int) -> int:
        query = """
        INSERT INTO viewer_actions (viewer_user_id, action_key, count, first_at_ms, last_at_ms)
        VALUES ($1, $2, 1, $3, $3)
        ON CONFLICT (viewer_user_id, action_key) DO UPDATE SET
            count = viewer_actions.count + 1,
            first_at_ms = COALESCE(viewer_actions.first_at_ms, EXCLUDED.first_at_ms),
            last_at_ms = EXCLUDED.last_at_ms
        RETURNING count
        """
        async with acquire(self.pool) as conn:
            return await conn.fetchval(query, viewer_id, action_key, now_ms)
