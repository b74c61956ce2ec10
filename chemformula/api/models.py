"""Pydantic models for API requests and responses."""
from pydantic import BaseModel, Field, validator
from typing import List, Optional, Dict

from chemformula.config import settings
from chemformula.errors import CompositionParsingError
from chemformula.processors.formula_grammar import parse_tree


def _check_views(views: Optional[List[str]]) -> Optional[List[str]]:
    if views is None:
        return views
    unknown = [view for view in views if view not in settings.supported_views]
    if unknown:
        raise ValueError(f"Unknown views: {', '.join(unknown)}")
    return views


class ConversionRequest(BaseModel):
    """Request model for a single conversion."""
    formula: str = Field(..., description="Chemical formula (e.g., 'SiO2', 'Pt5wt%/SiO2')")
    views: Optional[List[str]] = Field(
        default=None,
        description="Views to compute; all views if omitted"
    )
    strict_elements: bool = Field(
        default=True,
        description="Reject unrecognized element codes"
    )

    @validator('formula')
    def validate_formula(cls, v):
        """Validate formula syntax."""
        if not v or not v.strip():
            raise ValueError("Formula cannot be empty")
        try:
            parse_tree(v.strip())
        except CompositionParsingError as e:
            raise ValueError(str(e))
        return v

    @validator('views')
    def validate_views(cls, v):
        return _check_views(v)

    class Config:
        json_schema_extra = {
            "example": {
                "formula": "Pt5wt%/SiO2",
                "views": ["molar", "weight_percent"],
                "strict_elements": True
            }
        }


class BatchConversionRequest(BaseModel):
    """Request model for batch conversions."""
    formulas: List[str] = Field(..., description="List of chemical formulas")
    views: Optional[List[str]] = Field(default=None)
    strict_elements: bool = Field(default=True)

    @validator('formulas')
    def validate_formulas(cls, v):
        """Validate batch size."""
        if len(v) == 0:
            raise ValueError("At least one formula must be provided")
        if len(v) > settings.max_batch_size:
            raise ValueError(f"Maximum {settings.max_batch_size} formulas per batch request")
        return v

    @validator('views')
    def validate_views(cls, v):
        return _check_views(v)


class CompositionModel(BaseModel):
    """Molar amounts and mass fractions keyed by element symbol."""
    molar: Dict[str, float]
    mass_fraction: Dict[str, float]


class ConversionResponse(BaseModel):
    """Response model for a conversion."""
    success: bool
    formula: str
    composition: Optional[CompositionModel] = None
    molar: Optional[Dict[str, float]] = None
    weight_percent: Optional[Dict[str, float]] = None
    molar_percent: Optional[Dict[str, float]] = None
    molecular_weight: Optional[float] = None
    view_errors: Optional[Dict[str, str]] = None
    processing_time: Optional[float] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "formula": "Pt5wt%/SiO2",
                "composition": {
                    "molar": {"Si": 1.0, "O": 2.0},
                    "mass_fraction": {"Pt": 5.0}
                },
                "weight_percent": {"Pt": 5.0, "Si": 44.41, "O": 50.59},
                "processing_time": 0.001
            }
        }


class ElementInfo(BaseModel):
    """A supported element and its atomic weight."""
    symbol: str
    atomic_number: int
    atomic_weight: float


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    detail: Optional[str] = None
    formula: Optional[str] = None
