from __future__ import annotations

import sqlalchemy as sa
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from db.placeholder_data import PlaceholderDataset
from db.seed import SeedDatabase, Seeder, SeedError
from services.seed.app.db import ENGINE, get_database, get_dataset
from services.seed.app.logging import configure_logging, logger
from services.seed.app.observability import add_metrics_middleware, record_seed_run, setup_tracing
from services.seed.app.schemas import HealthResponse, SeedErrorResponse, SeedResponse
from services.seed.app.settings import SETTINGS


app = FastAPI(title="Dashboard Seed API", version="0.1.0")
configure_logging(SETTINGS.log_level, service_name="seed")
add_metrics_middleware(app, service_name="seed")
if SETTINGS.otel_enabled:
    setup_tracing(app, ENGINE, service_name="seed")


@app.exception_handler(SeedError)
async def seed_error_handler(request: Request, exc: SeedError) -> JSONResponse:
    record_seed_run("failure")
    logger.error("seed_request_failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=500, content=SeedErrorResponse(error=exc.message).model_dump())


@app.get("/healthz", response_model=HealthResponse)
async def healthz(database: SeedDatabase = Depends(get_database)) -> HealthResponse:
    async with database.transaction() as tx:
        await tx.execute(sa.text("SELECT 1"))
    return HealthResponse(ok=True)


@app.get(SETTINGS.seed_route, response_model=SeedResponse, responses={500: {"model": SeedErrorResponse}})
async def seed(
    database: SeedDatabase = Depends(get_database),
    dataset: PlaceholderDataset = Depends(get_dataset),
) -> SeedResponse:
    # Seeder raises SeedError on any failure; the handler above turns it into a 500.
    result = await Seeder(dataset, hash_rounds=SETTINGS.hash_rounds).seed(database)
    record_seed_run("success")
    logger.info("seed_request_finished", counts=result.counts)
    return SeedResponse(message=result.message)
