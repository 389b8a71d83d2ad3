# app/models.py
"""SQLAlchemy ORM models for the relational side of the statistics sources.

`listings` is owned by the listings CRUD service; this service only reads it,
together with `agents` and the per-day `listing_views` counters.
"""
from sqlalchemy import Column, Integer, Text, Numeric, Boolean, TIMESTAMP, ForeignKey, func, Index
from .db import Base

class Agent(Base):
    __tablename__ = "agents"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    active = Column(Boolean, nullable=False, default=False)

class Listing(Base):
    __tablename__ = "listings"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text)
    city = Column(Text)
    price = Column(Numeric(12, 2))
    bedrooms = Column(Integer)
    agent_id = Column(Integer, ForeignKey("agents.id"), index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

class ListingView(Base):
    __tablename__ = "listing_views"
    id = Column(Integer, primary_key=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False, index=True)
    date = Column(Text)
    views = Column(Integer, nullable=False, default=0)

Index("idx_listings_price", Listing.price)
