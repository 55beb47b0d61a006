import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import engine
from app.friends.router import router as friends_router
from app.posts.router import router as posts_router
from app.users.router import auth_router, router as user_router

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Social API запущен...")
    yield
    await engine.dispose()
    logger.info("Social API остановлен...")


app = FastAPI(lifespan=lifespan, title="Social API")


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.get("/health")
async def health():
    return {"message": "Social Media API is running!"}


# users раньше friends: /users/search/{query} должен матчиться до /users/{user_id}/friends
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(friends_router)
app.include_router(posts_router)


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="127.0.0.1", port=8000, reload=True)
