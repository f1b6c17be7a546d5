import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import API_HOST, API_PORT, CORS_ORIGINS, LOG_LEVEL
from database import close_pool, create_pool
from handlers.achievements_handler import router as achievements_router
from init_pg_db import create_achievement_tables

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 1) asyncpg pool
    await create_pool()

    # 2) schema
    await create_achievement_tables()
    logging.info("✅ Database connected and schema ensured")

    try:
        yield
    finally:
        await close_pool()
        logging.info("🛑 API stopped, pool closed.")


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title="ViewerFrenzy Achievements API", lifespan=lifespan if use_lifespan else None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthcheck")
    async def healthcheck():
        return {"ok": True}

    app.include_router(achievements_router)
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)
