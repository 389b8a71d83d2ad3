# tests/test_stats.py
import random
from decimal import Decimal

import pytest
from app.stats import (
    Agent, AgentStat, Listing, ViewRecord,
    compute_active_agent_stats, index_listings_by_agent, index_views_by_listing,
)


def test_scenario_a(scenario_a):
    agents, listings, views = scenario_a
    result = compute_active_agent_stats(agents, listings, views, 300000)
    assert result == [
        AgentStat(agent="Carol", listings=1, total_views=200),
        AgentStat(agent="Alice", listings=0, total_views=0),
    ]
    assert [s.to_dict() for s in result] == [
        {"agent": "Carol", "listings": 1, "totalViews": 200},
        {"agent": "Alice", "listings": 0, "totalViews": 0},
    ]


def test_default_threshold_is_300000(scenario_a):
    agents, listings, views = scenario_a
    assert compute_active_agent_stats(agents, listings, views) == \
        compute_active_agent_stats(agents, listings, views, Decimal("300000"))


def test_agent_without_listings_is_reported_with_zeroes():
    result = compute_active_agent_stats([Agent(id=7, name="Dana", active=True)], [], [])
    assert result == [AgentStat(agent="Dana", listings=0, total_views=0)]


def test_qualifying_listing_without_views_counts_but_adds_no_views():
    agents = [Agent(id=1, name="Eve", active=True)]
    listings = [Listing(id=10, agent_id=1, price=Decimal("500000")),
                Listing(id=11, agent_id=1, price=Decimal("600000"))]
    views = [ViewRecord(listing_id=10, date="2025-09-01", views=5)]
    assert compute_active_agent_stats(agents, listings, views) == [
        AgentStat(agent="Eve", listings=2, total_views=5)
    ]


def test_empty_inputs_give_empty_result():
    assert compute_active_agent_stats([], [], []) == []


def test_threshold_is_strictly_greater():
    agents = [Agent(id=1, name="Finn", active=True)]
    listings = [Listing(id=1, agent_id=1, price=Decimal("300000")),
                Listing(id=2, agent_id=1, price=Decimal("300000.01"))]
    views = [ViewRecord(listing_id=1, date="d", views=9), ViewRecord(listing_id=2, date="d", views=4)]
    assert compute_active_agent_stats(agents, listings, views) == [
        AgentStat(agent="Finn", listings=1, total_views=4)
    ]


def test_orphan_listings_and_views_are_ignored():
    agents = [Agent(id=1, name="Gus", active=True)]
    listings = [Listing(id=1, agent_id=999, price=Decimal("900000"))]
    views = [ViewRecord(listing_id=1, date="d", views=50), ViewRecord(listing_id=42, date="d", views=8)]
    assert compute_active_agent_stats(agents, listings, views) == [
        AgentStat(agent="Gus", listings=0, total_views=0)
    ]


def test_equal_totals_keep_agent_order():
    agents = [Agent(id=i, name=name, active=True) for i, name in enumerate(["Zoe", "Adam", "Mia"])]
    result = compute_active_agent_stats(agents, [], [])
    assert [s.agent for s in result] == ["Zoe", "Adam", "Mia"]


def test_inputs_are_not_mutated(scenario_a):
    agents, listings, views = scenario_a
    before = (list(agents), list(listings), list(views))
    compute_active_agent_stats(agents, listings, views)
    assert (agents, listings, views) == before


def test_accepts_generators(scenario_a):
    agents, listings, views = scenario_a
    result = compute_active_agent_stats(iter(agents), (l for l in listings), iter(views))
    assert [s.agent for s in result] == ["Carol", "Alice"]


@pytest.mark.parametrize("missing", ["agents", "listings", "views"])
def test_none_collection_is_a_contract_violation(missing):
    kwargs = {"agents": [], "listings": [], "views": []}
    kwargs[missing] = None
    with pytest.raises(TypeError, match=missing):
        compute_active_agent_stats(**kwargs)


def test_wrong_record_type_is_a_contract_violation():
    with pytest.raises(TypeError):
        compute_active_agent_stats([{"id": 1, "name": "x", "active": True}], [], [])


def test_indexes_group_by_owner():
    listings = [Listing(id=1, agent_id=5, price=Decimal(1)), Listing(id=2, agent_id=5, price=Decimal(2)),
                Listing(id=3, agent_id=6, price=Decimal(3))]
    by_agent = index_listings_by_agent(listings)
    assert [l.id for l in by_agent[5]] == [1, 2]
    assert [l.id for l in by_agent[6]] == [3]

    views = [ViewRecord(listing_id=1, date="a", views=1), ViewRecord(listing_id=1, date="b", views=2)]
    assert sum(v.views for v in index_views_by_listing(views)[1]) == 3


def test_records_from_documents_default_missing_fields():
    assert Agent.from_document({"_id": 3}) == Agent(id=3, name="", active=False)
    assert Listing.from_document({"_id": 4, "agentId": 3, "price": 310000.5}) == \
        Listing(id=4, agent_id=3, price=Decimal("310000.5"))
    assert ViewRecord.from_document({"listingId": 4}) == ViewRecord(listing_id=4, date="", views=0)
    assert ViewRecord.from_document({"listing_id": 4, "views": None}).views == 0


def test_properties_on_random_data():
    rng = random.Random(1234)
    agents = [Agent(id=i, name=f"agent-{i}", active=rng.random() < 0.6) for i in range(40)]
    listings = [Listing(id=i, agent_id=rng.randrange(45), price=Decimal(rng.randrange(100000, 600000)))
                for i in range(200)]
    views = [ViewRecord(listing_id=rng.randrange(210), date="2025-09-01", views=rng.randrange(0, 500))
             for _ in range(1000)]
    threshold = Decimal(300000)

    result = compute_active_agent_stats(agents, listings, views, threshold)

    active = [a for a in agents if a.active]
    assert sorted(s.agent for s in result) == sorted(a.name for a in active)
    for a, stat in ((a, s) for a in active for s in result if s.agent == a.name):
        owned = {l.id for l in listings if l.agent_id == a.id and l.price > threshold}
        assert stat.listings == len(owned)
        assert stat.total_views == sum(v.views for v in views if v.listing_id in owned)
    totals = [s.total_views for s in result]
    assert totals == sorted(totals, reverse=True)


@pytest.mark.parametrize("flag", ["false", "true", 1, None])
def test_only_boolean_true_marks_agent_active(flag):
    agent = Agent.from_document({"_id": 5, "name": "Hal", "active": flag})
    assert agent.active is False
    assert compute_active_agent_stats([agent], [], []) == []
