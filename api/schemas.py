"""
api/schemas.py — Pydantic response models
==========================================
Centralises the data-transfer objects so that FastAPI can auto-generate
OpenAPI docs and validate what the routes return.
"""

from typing import Optional

from pydantic import BaseModel, Field

from model.stress import CategoryRecord
from vision.classifier import ColorLabel


class StatusResponse(BaseModel):
    status: str                                  # "idle" | "scanning" | "complete" | "error"
    message: str
    current_label: Optional[ColorLabel] = None   # Colour being held, if any
    remaining_seconds: Optional[int] = None      # Countdown while holding
    events: list[str] = Field(default_factory=list)


class CategoryData(BaseModel):
    """One row of the colour → stress table."""
    label: ColorLabel
    level: str
    explanation: str
    advice: list[str]
    scale_position: int = Field(..., ge=0, le=100, description="Scale marker position in percent.")

    @classmethod
    def from_record(cls, label: ColorLabel, record: CategoryRecord) -> "CategoryData":
        return cls(
            label=label,
            level=record.level,
            explanation=record.explanation,
            advice=list(record.advice),
            scale_position=record.scale_position,
        )


class ScanResultResponse(BaseModel):
    """Payload returned once a colour has been confirmed."""
    disclaimer: str
    label: ColorLabel
    level: str
    explanation: str
    advice: list[str]
    scale_position: int
    scan_duration_seconds: float
