"""FastAPI application exposing the calculation and history endpoints."""
from contextlib import asynccontextmanager
import time
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from arithmetic_history_service.common.config import Settings
from arithmetic_history_service.common.logger import logger
from arithmetic_history_service.server.handler import CalculationHandler, HandlerResponse
from arithmetic_history_service.server.history_store import HistoryStore


def _to_json(response: HandlerResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body)


def create_app(settings: Optional[Settings] = None, store: Optional[HistoryStore] = None) -> FastAPI:
    """
    Build the application around an explicitly owned history store.

    :param Settings settings: Service settings, read from the environment when omitted
    :param HistoryStore store: Store to use, built from ``settings.db_path`` when omitted

    :return: Configured FastAPI application
    :rtype: FastAPI
    """
    settings = settings or Settings.from_env()
    store = store or HistoryStore(settings.db_path)
    handler = CalculationHandler(store=store, history_limit=settings.history_limit)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.init()
        yield
        store.close()
        logger.info("🖥️ History store closed")

    app = FastAPI(title="Arithmetic History Service", version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.handler = handler

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"🌐 {request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response

    @app.post("/calculate")
    async def calculate(request: Request) -> JSONResponse:
        payload: Any
        try:
            payload = await request.json()
        except ValueError:
            # Not JSON; the validator reports it as a body violation
            payload = None
        return _to_json(await run_in_threadpool(handler.compute, payload))

    @app.get("/history")
    async def history() -> JSONResponse:
        return _to_json(await run_in_threadpool(handler.get_history))

    return app
