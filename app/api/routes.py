# app/api/routes.py
import os
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
from .. import schemas
from ..db import get_db, get_mongo_db
from ..sources import SourceUnavailableError, build_source, stats_backend
from ..stats import DEFAULT_PRICE_THRESHOLD, compute_active_agent_stats, to_decimal
from ..utils import logger

API_VERSION = "1.0.0"
PRICE_THRESHOLD = to_decimal(os.getenv("STATS_PRICE_THRESHOLD", DEFAULT_PRICE_THRESHOLD))

router = APIRouter()

def get_stats_source(db: Session = Depends(get_db)):
    backend = stats_backend()
    if backend == "mongo":
        return build_source(backend, mongo_db=get_mongo_db())
    return build_source(backend, db=db)

@router.get("/", response_model=schemas.ServiceIndex)
def index():
    return {
        "message": "Real Estate Listings API",
        "version": API_VERSION,
        "endpoints": {
            "health": "/health",
            "stats": {
                "GET /stats/active-agents": "Get active agents statistics with listings and views"
            },
        },
    }

@router.get("/health", response_model=schemas.HealthOut)
def health():
    return {"status": "OK", "message": "Real Estate API is running"}

@router.get(
    "/stats/active-agents",
    response_model=List[schemas.AgentStatOut],
    responses={500: {"model": schemas.ErrorOut}},
)
def active_agent_stats(
    price_threshold: float | None = Query(None, ge=0),
    source=Depends(get_stats_source),
):
    threshold = PRICE_THRESHOLD if price_threshold is None else to_decimal(price_threshold)
    try:
        snapshot = source.load_snapshot(threshold)
    except SourceUnavailableError as e:
        logger.exception("Error fetching active agents stats: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch active agents statistics")
    stats = compute_active_agent_stats(snapshot.agents, snapshot.listings, snapshot.views, threshold)
    logger.info("Computed stats for %d active agents (threshold %s)", len(stats), threshold)
    return [stat.to_dict() for stat in stats]
