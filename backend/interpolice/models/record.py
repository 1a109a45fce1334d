"""
Criminal Record Models

Request/response bodies for direct criminal record administration.
"""

from datetime import date as Date, time as Time
from typing import Dict, Optional

from pydantic import BaseModel, Field


class RecordCreateRequest(BaseModel):
    """Direct entry of a criminal record"""
    date: Date
    time: Time
    location: int = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=5000)
    crime_type: Optional[str] = Field(None, max_length=255)

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2026-10-01",
                "time": "22:15:00",
                "location": 1,
                "description": "Armed robbery at the spaceport",
                "crime_type": "Robbery"
            }
        }


class RecordUpdateRequest(BaseModel):
    """Partial update of a criminal record"""
    citizen_id: Optional[int] = Field(None, gt=0)
    date: Optional[Date] = None
    time: Optional[Time] = None
    location: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    crime_type: Optional[str] = Field(None, max_length=255)


class RecordResponse(BaseModel):
    """Persisted criminal record"""
    id: int
    citizen_id: int
    citizen_name: Optional[str] = None
    citizen_last_name: Optional[str] = None
    date: Date
    time: Time
    location: int
    location_name: Optional[str] = None
    description: str
    crime_type: str


class RecordCountResponse(BaseModel):
    citizen_id: int
    total_records: int


class RecordStatsResponse(BaseModel):
    """Aggregate criminal record statistics"""
    total_records: int
    total_citizens_with_records: int
    by_crime_type: Dict[str, int]
    automatic_records: int


class DangerousLocationResponse(BaseModel):
    location: int
    location_name: str
    total_crimes: int
    unique_criminals: int
