"""Pydantic schemas for the reviews API."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewBase(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    username: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    comments: str = Field("", max_length=5000)


class ReviewCreate(ReviewBase):
    posted_on: Optional[datetime] = None


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    comments: Optional[str] = Field(None, max_length=5000)


class ReviewRead(ReviewBase):
    id: int
    posted_on: datetime

    model_config = {"from_attributes": True}


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
