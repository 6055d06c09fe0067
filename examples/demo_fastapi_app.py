import logging
import os
import secrets
import sys
import time
from pathlib import Path
from typing import Any

# Allow running this demo without installing the package:
#   python examples/demo_fastapi_app.py
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi import Body, Cookie, FastAPI, HTTPException, Response

from simple_cacheable import (
    CacheConfig,
    CacheSessionHandler,
    CacheSettings,
    InvalidKeyError,
    create_backend,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="simple-cacheable demo")


@app.on_event("startup")
def _startup() -> None:
    # Examples:
    #   CACHE_BACKEND=redis REDIS_URL=redis://localhost:6379/0 CACHE_PREFIX=demo:
    #   CACHE_BACKEND=memory CACHE_DEFAULT_TTL=30
    settings = CacheSettings.from_env()
    CacheConfig.init(create_backend(settings))
    logger.info("Demo using %s backend", settings.backend)


@app.on_event("shutdown")
def _shutdown() -> None:
    CacheConfig.reset()


@app.get("/users/{user_id}")
def get_user(user_id: int) -> dict:
    cache = CacheConfig.get_backend()
    key = f"user:{user_id}"

    cached = cache.get(key)
    if cached is not None:
        return cached

    # Simulate slow work
    time.sleep(2)
    logger.info("Fetching user %s from source", user_id)
    user = {"user_id": user_id, "name": f"user-{user_id}", "ts": time.time()}
    cache.set(key, user, 30)
    return user


@app.delete("/users/{user_id}")
def evict_user(user_id: int) -> dict:
    CacheConfig.get_backend().delete(f"user:{user_id}")
    logger.info("Evicting cache for user %s", user_id)
    return {"evicted": True, "user_id": user_id}


@app.post("/cache")
def put_many(values: dict[str, Any] = Body(...), ttl: int | None = None) -> dict:
    try:
        stored = CacheConfig.get_backend().set_multiple(values, ttl)
    except InvalidKeyError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"stored": stored}


@app.get("/cache")
def get_many(keys: str, default: str | None = None) -> dict:
    try:
        return CacheConfig.get_backend().get_multiple(keys.split(","), default)
    except InvalidKeyError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/session")
def write_session(
    response: Response,
    data: str = Body(..., embed=True),
    session_id: str | None = Cookie(default=None),
) -> dict:
    handler = CacheSessionHandler(ttl=int(os.getenv("SESSION_TTL", "1800")))
    session_id = session_id or secrets.token_hex(16)
    handler.write(session_id, data)
    response.set_cookie("session_id", session_id, httponly=True)
    return {"session_id": session_id}


@app.get("/session")
def read_session(session_id: str | None = Cookie(default=None)) -> dict:
    if session_id is None:
        return {"data": ""}
    return {"data": CacheSessionHandler().read(session_id)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
