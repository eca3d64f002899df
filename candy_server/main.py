import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from candy_server.db import create_tables, engine
from candy_server.domain.errors import CandyCrushError
from candy_server.routers import game
from candy_server.routers.game import candy_crush_error_handler, game_service

scheduler = AsyncIOScheduler()
logging.basicConfig(level=logging.INFO)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app):
    """Create the tables and start purging expired session tokens.
    This function is called to start the server.
    """
    await create_tables(engine)

    # If a session token is expired, delete it
    scheduler.add_job(
        game_service.delete_expired_session_tokens,
        "interval",
        hours=1,
    )
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(game.game_router)
app.add_exception_handler(CandyCrushError, candy_crush_error_handler)


# if __name__ == "__main__":
#     uvicorn.run(app, host="0.0.0.0", port=8080, reload=True)
