"""Quality Gates service FastAPI application."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.shared.config import QualityGatesConfig
from src.shared.constants import QUALITY_GATES_SERVICE_NAME, VERSION
from src.shared.db.connection import ConnectionPool
from src.shared.db.schema import init_quality_gates_db
from src.shared.errors import register_exception_handlers
from src.shared.logging import TraceIDMiddleware, setup_logging

config = QualityGatesConfig()
logger = setup_logging(QUALITY_GATES_SERVICE_NAME, config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - initialize and cleanup resources."""
    app.state.start_time = time.time()
    app.state.config = config

    app.state.pool = ConnectionPool(config.database_path)
    init_quality_gates_db(app.state.pool)

    logger.info(
        "Service started: name=%s version=%s db=%s",
        QUALITY_GATES_SERVICE_NAME, VERSION, config.database_path,
    )
    yield

    if app.state.pool:
        app.state.pool.close()
    logger.info("Service stopped: name=%s", QUALITY_GATES_SERVICE_NAME)


app = FastAPI(
    title="Quality Gates",
    description="Manages quality gates, including conditions and project association",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(TraceIDMiddleware)
register_exception_handlers(app)

from src.quality_gates.routers.health import router as health_router
from src.quality_gates.routers.qualitygates import router as qualitygates_router
from src.quality_gates.routers.conditions import router as conditions_router

app.include_router(health_router)
app.include_router(qualitygates_router)
app.include_router(conditions_router)
