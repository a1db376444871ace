from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RatingCreate(BaseModel):
    # strict: true and 4.0 are not scores; the 1..5 range is checked by the aggregator
    score: int = Field(strict=True)
    feedback: str = Field(default="", max_length=2000)
    listing_id: str | None = None


class RatingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reviewer_id: str
    rated_party_id: str
    listing_id: str | None
    score: int
    feedback: str
    created_at: datetime


class ReputationSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    average: float
    count: int
