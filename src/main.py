import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from src.errors import DispatchError
from src.providers import get_firebase_app
from src.routers.rest import router as rest_router

# ------------------------ LOGGING ------------------------
logging.disable()
# ------------------------ FASTAPI ------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[Dict[str, Any]]:
    """
    Initialize the Firebase app once; the directory and messaging
    clients share it for the life of the process.
    """
    get_firebase_app()
    logger.info(
        f"🚀 [{os.getpid()}] Application started on http://127.0.0.1:8000, Docs: http://127.0.0.1:8000/docs"
    )

    try:
        yield
    finally:
        logger.info("Application shutdown")


app = FastAPI(
    title="Broadcast Notification Service",
    description="Admin-only broadcast of push notifications to Firebase Cloud Messaging topics",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(rest_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DispatchError)
async def dispatch_error_handler(request: Request, exc: DispatchError) -> JSONResponse:
    logger.info(f"[{request.url.path}] {exc.code}: {exc.message}")
    return JSONResponse({"error": exc.to_dict()}, status_code=exc.http_status)
