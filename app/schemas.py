# app/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict

class AgentStatOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    agent: str
    listings: int = Field(..., ge=0)
    total_views: int = Field(..., ge=0, alias="totalViews")

class ErrorOut(BaseModel):
    error: bool = True
    message: str

class HealthOut(BaseModel):
    status: str
    message: str

class ServiceIndex(BaseModel):
    message: str
    version: str
    endpoints: Dict[str, object]
