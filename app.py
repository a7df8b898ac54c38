#!/usr/bin/env python3
"""
Main entry point for the yaus URL shortener service.

The store, cache and service are constructed once at startup and injected
into the FastAPI app; request handlers reach them through ``app.state``.

Usage:
    python app.py

Environment variables:
    SHORT_DB - SQLite file path or postgresql:// URL (in-memory when unset)
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Host prefix for short links
    HOST, PORT - Address to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from yaus.service import build_service
from yaus.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger
    service = app.state.service

    logger.info("Starting yaus...")

    if config.short_db:
        logger.info(f"Opening store at {config.short_db}")
    else:
        logger.info("SHORT_DB not set, using an in-memory store")
    await service.store.initialize()

    if service.cache:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        await service.cache.connect()
    else:
        logger.info("Redis caching disabled")

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down yaus...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("yaus URL shortener")
    logger.info(f"Configuration: {config.model_dump()}")

    service = build_service(config, logger)
    app = create_app(
        service_instance=service,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
