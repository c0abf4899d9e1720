from typing import Any, List

from pydantic import BaseModel

from sitedash.models.site import DeleteResult, SiteIndex


class SiteListResponse(BaseModel):
    success: bool = True
    data: List[str]
    count: int


class SiteIndexResponse(BaseModel):
    success: bool = True
    data: SiteIndex


class SiteResponse(BaseModel):
    success: bool = True
    data: Any


class SiteCreatedResponse(SiteResponse):
    filename: str


class SiteDeletedResponse(BaseModel):
    success: bool = True
    data: DeleteResult


class RulesResponse(BaseModel):
    success: bool = True
    data: str


class HealthResponse(BaseModel):
    success: bool = True
    status: str
    timestamp: str
    service: str
