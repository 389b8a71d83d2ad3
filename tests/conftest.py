# tests/conftest.py
import os

# must be set before app.db is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STATS_BACKEND", "mongo")

import pytest
from decimal import Decimal
from app.stats import Agent, Listing, ViewRecord

@pytest.fixture
def scenario_a():
    agents = [
        Agent(id=101, name="Alice", active=True),
        Agent(id=102, name="Bob", active=False),
        Agent(id=103, name="Carol", active=True),
    ]
    listings = [
        Listing(id=1, agent_id=101, price=Decimal("250000")),
        Listing(id=2, agent_id=102, price=Decimal("320000")),
        Listing(id=3, agent_id=103, price=Decimal("450000")),
    ]
    views = [
        ViewRecord(listing_id=1, date="2025-09-01", views=100),
        ViewRecord(listing_id=1, date="2025-09-10", views=80),
        ViewRecord(listing_id=2, date="2025-09-05", views=50),
        ViewRecord(listing_id=3, date="2025-09-08", views=200),
    ]
    return agents, listings, views
