# app/stats.py
"""Active-agent statistics.

Joins agents, their listings and the per-day view counters of those listings
into one summary row per active agent:

    agent       -> agent name
    listings    -> number of the agent's listings priced above the threshold
    totalViews  -> views accumulated on exactly those listings

Rows are ranked by total views, highest first. Agents with the same total keep
the order in which the agent source returned them.

Everything here is a pure in-memory transform over already-fetched records;
fetching them is done by `app.sources`.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Sequence

DEFAULT_PRICE_THRESHOLD = Decimal("300000")


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise TypeError(f"not a price: {value!r}")


@dataclass(frozen=True)
class Agent:
    id: int
    name: str
    active: bool

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Agent":
        return cls(
            id=int(doc["_id"] if "_id" in doc else doc["id"]),
            name=doc.get("name") or "",
            active=doc.get("active") is True,
        )


@dataclass(frozen=True)
class Listing:
    id: int
    agent_id: int
    price: Decimal

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Listing":
        agent_id = doc.get("agentId", doc.get("agent_id"))
        return cls(
            id=int(doc["_id"] if "_id" in doc else doc["id"]),
            # orphan listings keep a sentinel owner that never matches an agent
            agent_id=int(agent_id) if agent_id is not None else -1,
            price=to_decimal(doc.get("price")),
        )


@dataclass(frozen=True)
class ViewRecord:
    listing_id: int
    date: str
    views: int

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ViewRecord":
        listing_id = doc.get("listingId", doc.get("listing_id"))
        return cls(
            listing_id=int(listing_id) if listing_id is not None else -1,
            date=str(doc.get("date") or ""),
            views=int(doc.get("views") or 0),
        )


@dataclass(frozen=True)
class AgentStat:
    agent: str
    listings: int
    total_views: int

    def to_dict(self) -> Dict[str, Any]:
        return {"agent": self.agent, "listings": self.listings, "totalViews": self.total_views}


def _materialize(name: str, items: Iterable[Any], record_type: type) -> List[Any]:
    if items is None:
        raise TypeError(f"{name} must be a collection of {record_type.__name__}, got None")
    try:
        records = list(items)
    except TypeError:
        raise TypeError(f"{name} must be a collection of {record_type.__name__}, "
                        f"got {type(items).__name__}")
    for record in records:
        if not isinstance(record, record_type):
            raise TypeError(f"{name} contains {type(record).__name__}, expected {record_type.__name__}")
    return records


def active_agents(agents: Iterable[Agent]) -> List[Agent]:
    return [agent for agent in agents if agent.active is True]


def index_listings_by_agent(listings: Iterable[Listing]) -> Dict[int, List[Listing]]:
    by_agent: Dict[int, List[Listing]] = defaultdict(list)
    for listing in listings:
        by_agent[listing.agent_id].append(listing)
    return by_agent


def index_views_by_listing(views: Iterable[ViewRecord]) -> Dict[int, List[ViewRecord]]:
    by_listing: Dict[int, List[ViewRecord]] = defaultdict(list)
    for record in views:
        by_listing[record.listing_id].append(record)
    return by_listing


def qualifying_listings(listings: Sequence[Listing], price_threshold: Decimal) -> List[Listing]:
    """Listings strictly above the threshold."""
    return [listing for listing in listings if listing.price > price_threshold]


def compute_active_agent_stats(
    agents: Iterable[Agent],
    listings: Iterable[Listing],
    views: Iterable[ViewRecord],
    price_threshold: Any = DEFAULT_PRICE_THRESHOLD,
) -> List[AgentStat]:
    """Return one `AgentStat` per active agent, highest `total_views` first.

    Raises TypeError when a collection is missing or holds the wrong record type.
    Orphan listings, listings without views and agents without listings are
    valid and simply produce zeroes.
    """
    agents = _materialize("agents", agents, Agent)
    listings = _materialize("listings", listings, Listing)
    views = _materialize("views", views, ViewRecord)
    threshold = to_decimal(price_threshold)

    listings_by_agent = index_listings_by_agent(listings)
    views_by_listing = index_views_by_listing(views)

    stats = []
    for agent in active_agents(agents):
        # .get keeps the defaultdicts from growing while we read them
        owned = qualifying_listings(listings_by_agent.get(agent.id, ()), threshold)
        total_views = sum(
            record.views
            for listing in owned
            for record in views_by_listing.get(listing.id, ())
        )
        stats.append(AgentStat(agent=agent.name, listings=len(owned), total_views=total_views))

    # sorted() is stable: equal totals keep agent source order
    return sorted(stats, key=lambda stat: stat.total_views, reverse=True)
