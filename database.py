import logging

import asyncpg

from config import DATABASE_URL, DB_POOL_MAX_SIZE, DB_POOL_MIN_SIZE

pool = None


async def create_pool():
    global pool
    if pool is None:
        if not DATABASE_URL:
            raise RuntimeError("DATABASE_URL is not set. Check .env")
        pool = await asyncpg.create_pool(
            DATABASE_URL,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
        )
        logging.info(f"✅ Stats DB pool created ({DB_POOL_MIN_SIZE}-{DB_POOL_MAX_SIZE} connections)")


async def close_pool():
    global pool
    if pool:
        await pool.close()
        pool = None
        logging.info("🔒 Stats DB pool closed")


async def get_pool():
    if pool is None:
        raise RuntimeError("Stats DB pool is not initialized! Call create_pool() first.")
    return pool
