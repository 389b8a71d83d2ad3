import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

AGENTS = [
    {"_id": 101, "name": "Alice Smith", "active": True},
    {"_id": 102, "name": "Bob Johnson", "active": False},
    {"_id": 103, "name": "Carol Lee", "active": True},
]

LISTINGS = [
    {"_id": 1, "title": "Modern Apartment", "city": "New York", "agentId": 101, "price": 250000},
    {"_id": 2, "title": "Cozy Suburban Home", "city": "Chicago", "agentId": 102, "price": 320000},
    {"_id": 3, "title": "Luxury Condo", "city": "New York", "agentId": 103, "price": 450000},
]

VIEWS = [
    {"listingId": 1, "date": "2025-09-01", "views": 100},
    {"listingId": 1, "date": "2025-09-10", "views": 80},
    {"listingId": 2, "date": "2025-09-05", "views": 50},
    {"listingId": 3, "date": "2025-09-08", "views": 200},
]


def seed_mongo(mongo_db):
    """Replace the three collections with the demo documents."""
    for name, docs in (("agents", AGENTS), ("listings", LISTINGS), ("views", VIEWS)):
        mongo_db[name].delete_many({})
        mongo_db[name].insert_many([dict(d) for d in docs])
        print(f"Inserted {len(docs)} documents into '{name}'")


def seed_sql(session):
    """Insert the demo rows using the SQLAlchemy read models."""
    from app.models import Agent, Listing, ListingView

    session.add_all(Agent(id=a["_id"], name=a["name"], active=a["active"]) for a in AGENTS)
    session.flush()
    session.add_all(
        Listing(id=l["_id"], title=l["title"], city=l["city"].lower(), price=l["price"], bedrooms=2,
                agent_id=l["agentId"])
        for l in LISTINGS
    )
    session.flush()
    session.add_all(ListingView(listing_id=v["listingId"], date=v["date"], views=v["views"]) for v in VIEWS)
    session.commit()
    print(f"Inserted {len(AGENTS)} agents, {len(LISTINGS)} listings, {len(VIEWS)} view rows")


if __name__ == "__main__":
    backend = (sys.argv[1] if len(sys.argv) > 1 else os.getenv("STATS_BACKEND", "mongo")).lower()
    print(f"Seeding demo data into the {backend} backend...")

    if backend == "mongo":
        from app.db import get_mongo_db

        seed_mongo(get_mongo_db())
    elif backend == "sql":
        from app.db import Base, SessionLocal, engine

        Base.metadata.create_all(bind=engine)
        session = SessionLocal()
        try:
            seed_sql(session)
        finally:
            session.close()
    else:
        raise SystemExit(f"Unknown backend '{backend}', expected 'mongo' or 'sql'")
