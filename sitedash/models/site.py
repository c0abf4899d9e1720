from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SiteIndex(BaseModel):
    """Summary of every site file present when the index was generated."""

    model_config = ConfigDict(populate_by_name=True)

    sites: List[str]
    generated_at: str = Field(alias="generatedAt")


class DeleteResult(BaseModel):
    success: bool = True
    filename: str
