"""
Data Models for Repetition Finder
=================================

Pydantic models for the HTTP request/response contract. Field aliases carry the
camelCase names used on the wire.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class RepetitionModel(BaseModel):
    """A sentence or phrase found on two or more distinct lines"""

    text: str = Field(..., description="Display text of the first occurrence (trimmed)")
    count: int = Field(..., ge=2, description="Number of distinct lines the text appears on")
    lines: List[int] = Field(..., description="Distinct 1-based line numbers, ascending")


class AnalysisModel(BaseModel):
    """Repetition analysis of a single input"""

    model_config = {"populate_by_name": True}

    sentences: List[RepetitionModel] = Field(default_factory=list, description="Repeated sentences")
    phrases: List[RepetitionModel] = Field(default_factory=list, description="Repeated 3-8 word phrases")
    total_repeated: int = Field(
        default=0,
        ge=0,
        alias="totalRepeated",
        description="Number of repeated sentences plus repeated phrases",
    )


class BatchItemModel(BaseModel):
    """Outcome for one named input; exactly one of analysis/error is set"""

    source: str = Field(..., description="File name, or 'Inline text'")
    kind: str = Field(..., description="Lowercased file extension without dot, or 'text'")
    analysis: Optional[AnalysisModel] = Field(default=None, description="Analysis when extraction succeeded")
    error: Optional[str] = Field(default=None, description="Failure message for this input only")


class BatchResponse(BaseModel):
    """Response for the analyze endpoints"""

    model_config = {"populate_by_name": True}

    total_repetitions: int = Field(
        ...,
        ge=0,
        alias="totalRepetitions",
        description="Sum of totalRepeated across successful inputs",
    )
    results: List[BatchItemModel] = Field(default_factory=list, description="Per-input results in request order")


class TextAnalysisRequest(BaseModel):
    """JSON body for analyzing inline text"""

    text: str = Field(..., description="Text to analyze")


class ErrorResponse(BaseModel):
    """Error body returned for rejected requests"""

    error: str
