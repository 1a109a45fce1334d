"""
Citizen Models

Registry request/response bodies and reference data.
"""

from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, Field


class CitizenCreateRequest(BaseModel):
    """Register a citizen"""
    full_name: str = Field(..., min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    nick_name: Optional[str] = Field(None, max_length=100)
    birth_date: date
    origin_planet: int = Field(..., gt=0)
    residence_planet: int = Field(..., gt=0)
    qr_code: str = Field(..., min_length=1, max_length=255)
    status_id: int = Field(2, gt=0)
    avatar_url: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "full_name": "Marta",
                "last_name": "Rojas",
                "nick_name": "mrojas",
                "birth_date": "1990-04-12",
                "origin_planet": 1,
                "residence_planet": 2,
                "qr_code": "QR-0001",
                "status_id": 2
            }
        }


class CitizenUpdateRequest(BaseModel):
    """Partial update of a citizen"""
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    nick_name: Optional[str] = Field(None, max_length=100)
    birth_date: Optional[date] = None
    origin_planet: Optional[int] = Field(None, gt=0)
    residence_planet: Optional[int] = Field(None, gt=0)
    qr_code: Optional[str] = Field(None, min_length=1, max_length=255)
    status_id: Optional[int] = Field(None, gt=0)
    avatar_url: Optional[str] = None


class CitizenResponse(BaseModel):
    """Citizen as stored in the registry"""
    id: int
    full_name: str
    last_name: Optional[str] = None
    nick_name: Optional[str] = None
    birth_date: date
    origin_planet: int
    origin_planet_name: Optional[str] = None
    residence_planet: int
    residence_planet_name: Optional[str] = None
    avatar_url: str
    qr_code: str
    status_id: int
    status_name: Optional[str] = None


class PlanetResponse(BaseModel):
    id: int
    planet_name: str


class StatusResponse(BaseModel):
    id: int
    status_name: str
    description: Optional[str] = None


class CitizenStatsResponse(BaseModel):
    """Registry statistics"""
    total_citizens: int
    by_status: Dict[str, int]
