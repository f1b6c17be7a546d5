# achievements/repository.py

from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Set, Tuple

import asyncpg

from .errors import StorageUninitialized
from .models import Achievement


@asynccontextmanager
async def acquire(pool):
    """Pool connection whose missing-table errors surface as StorageUninitialized."""
    async with pool.acquire() as conn:
        try:
            yield conn
        except asyncpg.exceptions.UndefinedTableError as e:
            raise StorageUninitialized(str(e)) from e


class AchievementRepository:
    def __init__(self, pool):
        self.pool = pool

    # ------------------------------------------
    # Catalog
    # ------------------------------------------
    async def list_active_achievements(self) -> List[Achievement]:
        query = """
        SELECT id, name, description, disabled, criteria
        FROM achievements
        WHERE disabled = FALSE
        ORDER BY id ASC
        """
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(query)

        return [
            Achievement(
                id=int(row["id"]),
                name=row["name"] or "",
                description=row["description"] or "",
                disabled=bool(row["disabled"]),
                criteria=row["criteria"] or "",
            )
            for row in rows
        ]

    # ------------------------------------------
    # Unlock ledger
    # ------------------------------------------
    async def get_unlocked_pairs(
        self,
        viewer_ids: Iterable[str],
        achievement_ids: Iterable[int],
    ) -> Set[Tuple[str, int]]:
        viewer_ids = list(viewer_ids)
        achievement_ids = list(achievement_ids)
        if not viewer_ids or not achievement_ids:
            return set()

        query = """
        SELECT viewer_user_id, achievement_id
        FROM viewer_achievements
        WHERE viewer_user_id = ANY($1::text[])
          AND achievement_id = ANY($2::bigint[])
        """
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(query, viewer_ids, achievement_ids)

        return {(row["viewer_user_id"], int(row["achievement_id"])) for row in rows}

    async def insert_unlock_if_absent(
        self,
        viewer_id: str,
        achievement_id: int,
        unlocked_at_ms: int,
        source: str,
        source_ref: str,
    ) -> bool:
        """Returns True only when this call actually created the unlock row."""
        query = """
        INSERT INTO viewer_achievements
            (viewer_user_id, achievement_id, unlocked_at_ms, source, source_ref)
        VALUES ($1, $2, $3, $4, $5)
        ON CONFLICT (viewer_user_id, achievement_id) DO NOTHING
        RETURNING id
        """
        async with acquire(self.pool) as conn:
            inserted_id = await conn.fetchval(
                query, viewer_id, achievement_id, unlocked_at_ms, source, source_ref
            )
        return inserted_id is not None

    async def get_unlock_times(self, viewer_id: str) -> Dict[int, int]:
        query = """
        SELECT achievement_id, unlocked_at_ms
        FROM viewer_achievements
        WHERE viewer_user_id = $1
        """
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(query, viewer_id)

        out = {}
        for row in rows:
            ts = int(row["unlocked_at_ms"] or 0)
            if ts > 0:
                out[int(row["achievement_id"])] = ts
        return out

    async def list_unlocked_for_viewer(self, viewer_id: str) -> List[dict]:
        query = """
        SELECT va.achievement_id, va.unlocked_at_ms, a.name, a.description
        FROM viewer_achievements va
        JOIN achievements a ON a.id = va.achievement_id
        WHERE va.viewer_user_id = $1
        ORDER BY va.unlocked_at_ms DESC
        """
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(query, viewer_id)

        return [
            {
                "achievementId": int(row["achievement_id"]),
                "unlockedAtMs": int(row["unlocked_at_ms"]),
                "name": row["name"] or "",
                "description": row["description"] or "",
            }
            for row in rows
        ]
