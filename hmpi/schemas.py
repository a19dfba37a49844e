from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class LimitEntry(BaseModel):
    """One metal's entry in a standards file or inline limit table."""
    permissible_limit: float = Field(..., description="Regulatory maximum concentration")
    ideal_value: float = Field(0.0, description="Background / zero-pollution concentration")
    unit: str = Field("mg/L", description="Unit of both values")
    weight: Optional[float] = Field(None, description="Standard-defined weight, overrides K / limit")


class StandardFile(BaseModel):
    """JSON standards file: a named limit table with optional risk bands."""
    name: str = Field(..., min_length=1)
    limits: Dict[str, Union[float, LimitEntry]]
    risk_bands: Optional[List[Tuple[float, str]]] = None


class ReadingIn(BaseModel):
    """One (metal, concentration, unit) triple as submitted."""
    model_config = ConfigDict(populate_by_name=True)

    metal: str = Field(..., alias="metal_name")
    concentration: float
    unit: str = "mg/L"


class AssessmentRequest(BaseModel):
    """
    A reading set for one location and time.

    The limit table comes either inline (`limits`) or from the named
    built-in `standard`.
    """
    location: Optional[str] = None
    timestamp: Optional[datetime] = None
    standard: Optional[str] = None
    readings: List[ReadingIn]
    limits: Optional[Dict[str, Union[float, LimitEntry]]] = None
    risk_bands: Optional[List[Tuple[float, str]]] = None
