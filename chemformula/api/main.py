"""FastAPI application for chemical formula conversions."""
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import List
import logging

from chemformula.api.models import (
    ConversionRequest,
    BatchConversionRequest,
    ConversionResponse,
    ElementInfo,
    HealthResponse,
    ErrorResponse
)
from chemformula.config import settings
from chemformula.models.element import ElementSymbol
from chemformula.processors.composition_parser import CompositionParser
from chemformula.services.conversion_service import ConversionService
from chemformula.utils.logging import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

app = FastAPI(
    title="Chemical Formula API",
    description="Parse composition expressions and convert between molar and weight-percent views",
    version=API_VERSION
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One service per element-strictness mode
services = {
    True: ConversionService(CompositionParser(strict_elements=True)),
    False: ConversionService(CompositionParser(strict_elements=False)),
}


@app.on_event("startup")
async def startup_event():
    """Configure logging on startup."""
    setup_logging()
    logger.info("Starting Chemical Formula API %s", API_VERSION)


@app.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {
        "message": "Chemical Formula API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health"
    }


@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timestamp=datetime.now().isoformat()
    )


@app.get("/api/v1/elements", response_model=List[ElementInfo])
async def list_elements():
    """List supported elements with their atomic weights."""
    return [
        ElementInfo(
            symbol=symbol.name,
            atomic_number=symbol.atomic_number,
            atomic_weight=symbol.atomic_weight
        )
        for symbol in ElementSymbol
        if symbol is not ElementSymbol.NONE
    ]


@app.post("/api/v1/convert", response_model=ConversionResponse)
async def convert(request: ConversionRequest):
    """
    Parse a formula and compute its molar and mass-based views.

    Args:
        request: Conversion request with formula and requested views

    Returns:
        Conversion results
    """
    service = services[request.strict_elements]
    result = service.convert(request.formula.strip(), request.views)

    if not result.get("success"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.get("error")
        )

    return ConversionResponse(**result)


@app.post("/api/v1/batch-convert")
async def batch_convert(request: BatchConversionRequest):
    """
    Convert multiple formulas.

    Failed conversions are reported per formula rather than failing the
    whole request.
    """
    service = services[request.strict_elements]
    results = service.convert_batch(
        [formula.strip() for formula in request.formulas],
        request.views
    )
    return {"results": results}


@app.exception_handler(ValueError)
async def value_error_handler(request, exc):
    """Handle conversion errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=str(exc)).model_dump(exclude_none=True)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chemformula.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload
    )
