# app/sources.py
"""Read-only sources feeding the active-agent statistics.

Each source hands back fully materialized lists of `Agent`, `Listing` and
`ViewRecord`. Sources may push filters down to their store (active agents,
listings above the price threshold, views of given listings); the statistics
code re-applies every filter, so an unfiltered source is equally correct.
"""
import os
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Protocol

from dotenv import load_dotenv
from pymongo.errors import PyMongoError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .stats import Agent, Listing, ViewRecord, to_decimal
from .utils import logger

load_dotenv()


def stats_backend():
    """Configured statistics backend, `mongo` (default) or `sql`."""
    return os.getenv("STATS_BACKEND", "mongo").lower()


class SourceUnavailableError(RuntimeError):
    """The backing store could not supply one of the input collections."""


class Snapshot(NamedTuple):
    agents: List[Agent]
    listings: List[Listing]
    views: List[ViewRecord]


class StatsSource(Protocol):
    def load_agents(self) -> List[Agent]: ...

    def load_listings(self, price_threshold: Decimal) -> List[Listing]: ...

    def load_views(self, listing_ids: Iterable[int]) -> List[ViewRecord]: ...

    def load_snapshot(self, price_threshold: Decimal) -> Snapshot: ...

    def ping(self) -> None: ...


def _load_snapshot(source, price_threshold) -> Snapshot:
    agents = source.load_agents()
    listings = source.load_listings(price_threshold)
    views = source.load_views([listing.id for listing in listings])
    logger.debug("Loaded %d agents, %d listings, %d view records",
                 len(agents), len(listings), len(views))
    return Snapshot(agents, listings, views)


class SqlStatsSource:
    """Reads the `agents`, `listings` and `listing_views` tables."""

    def __init__(self, db: Session):
        self.db = db

    def load_agents(self):
        try:
            rows = self.db.execute(
                select(models.Agent).where(models.Agent.active.is_(True)).order_by(models.Agent.id)
            ).scalars().all()
        except SQLAlchemyError as e:
            raise SourceUnavailableError(f"agents query failed: {e}") from e
        return [Agent(id=r.id, name=r.name or "", active=bool(r.active)) for r in rows]

    def load_listings(self, price_threshold):
        try:
            rows = self.db.execute(
                select(models.Listing.id, models.Listing.agent_id, models.Listing.price)
                .where(models.Listing.price > to_decimal(price_threshold))
            ).all()
        except SQLAlchemyError as e:
            raise SourceUnavailableError(f"listings query failed: {e}") from e
        return [
            Listing(id=r.id, agent_id=r.agent_id if r.agent_id is not None else -1,
                    price=to_decimal(r.price))
            for r in rows
        ]

    def load_views(self, listing_ids):
        ids = list(listing_ids)
        if not ids:
            return []
        try:
            rows = self.db.execute(
                select(models.ListingView.listing_id, models.ListingView.date, models.ListingView.views)
                .where(models.ListingView.listing_id.in_(ids))
            ).all()
        except SQLAlchemyError as e:
            raise SourceUnavailableError(f"listing_views query failed: {e}") from e
        return [ViewRecord(listing_id=r.listing_id, date=r.date or "", views=int(r.views or 0)) for r in rows]

    def load_snapshot(self, price_threshold):
        return _load_snapshot(self, price_threshold)

    def ping(self):
        try:
            self.db.execute(select(1))
        except SQLAlchemyError as e:
            raise SourceUnavailableError(f"database unreachable: {e}") from e


class MongoStatsSource:
    """Reads the `agents`, `listings` and `views` collections.

    Documents use `_id` as their key and camelCase references
    (`agentId`, `listingId`).
    """

    def __init__(self, mongo_db):
        self.mongo_db = mongo_db

    def _load(self, collection, query, record_type):
        try:
            docs = list(self.mongo_db[collection].find(query))
        except PyMongoError as e:
            raise SourceUnavailableError(f"{collection} lookup failed: {e}") from e
        try:
            return [record_type.from_document(doc) for doc in docs]
        except (KeyError, TypeError, ValueError) as e:
            raise SourceUnavailableError(f"malformed document in {collection}: {e!r}") from e

    def load_agents(self):
        return self._load("agents", {"active": True}, Agent)

    def load_listings(self, price_threshold):
        # BSON has no Decimal; the exact comparison happens again in app.stats
        query = {"price": {"$gt": float(to_decimal(price_threshold))}}
        return self._load("listings", query, Listing)

    def load_views(self, listing_ids):
        ids = list(listing_ids)
        if not ids:
            return []
        return self._load("views", {"listingId": {"$in": ids}}, ViewRecord)

    def load_snapshot(self, price_threshold):
        return _load_snapshot(self, price_threshold)

    def ping(self):
        try:
            self.mongo_db.command("ping")
        except PyMongoError as e:
            raise SourceUnavailableError(f"mongodb unreachable: {e}") from e


def build_source(backend=None, db=None, mongo_db=None):
    backend = (backend or stats_backend()).lower()
    if backend == "sql":
        if db is None:
            raise ValueError("sql backend requires a database session")
        return SqlStatsSource(db)
    if backend == "mongo":
        if mongo_db is None:
            raise ValueError("mongo backend requires a database handle")
        return MongoStatsSource(mongo_db)
    raise ValueError(f"Unknown STATS_BACKEND '{backend}'")
