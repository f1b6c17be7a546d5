import logging

from database import get_pool


async def create_achievement_tables(pool=None):
    if pool is None:
        pool = await get_pool()
    async with pool.acquire() as conn:
        # -------------------------------
        # 🔹 Race results (written by competition submissions)
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS competition_results (
                id BIGSERIAL PRIMARY KEY,
                competition_id BIGINT NOT NULL,
                viewer_user_id TEXT NOT NULL,
                finish_position INTEGER,
                status TEXT NOT NULL,
                created_at_ms BIGINT NOT NULL,
                updated_at_ms BIGINT NOT NULL,
                UNIQUE(competition_id, viewer_user_id)
            )
        """)

        # -------------------------------
        # 🔹 Achievement catalog
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS achievements (
                id BIGSERIAL PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                disabled BOOLEAN NOT NULL DEFAULT FALSE,
                criteria TEXT NOT NULL,
                created_at_ms BIGINT NOT NULL,
                updated_at_ms BIGINT NOT NULL
            )
        """)

        # -------------------------------
        # 🔹 Unlock ledger (one row per viewer/achievement, ever)
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS viewer_achievements (
                id BIGSERIAL PRIMARY KEY,
                viewer_user_id TEXT NOT NULL,
                achievement_id BIGINT NOT NULL,
                unlocked_at_ms BIGINT NOT NULL,
                source TEXT,
                source_ref TEXT,
                FOREIGN KEY(achievement_id) REFERENCES achievements(id) ON DELETE CASCADE,
                UNIQUE(viewer_user_id, achievement_id)
            )
        """)

        # -------------------------------
        # 🔹 Action counters
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS viewer_actions (
                id BIGSERIAL PRIMARY KEY,
                viewer_user_id TEXT NOT NULL,
                action_key TEXT NOT NULL,
                count INTEGER NOT NULL DEFAULT 0,
                first_at_ms BIGINT,
                last_at_ms BIGINT,
                UNIQUE(viewer_user_id, action_key)
            )
        """)

        # -------------------------------
        # 🔹 Indexes
        # -------------------------------
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_results_viewer ON competition_results(viewer_user_id, competition_id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_achievements_disabled ON achievements(disabled, id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_viewer_achievements_viewer ON viewer_achievements(viewer_user_id, unlocked_at_ms DESC)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_viewer_achievements_achievement ON viewer_achievements(achievement_id, unlocked_at_ms DESC)")

        logging.info("✅ Achievement tables created or already exist.")
