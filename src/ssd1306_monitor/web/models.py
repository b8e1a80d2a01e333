"""Request and response models for the monitor web API."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ContrastRequest(BaseModel):
    value: int = Field(ge=0, le=255, description="Contrast level, 0-255")


class InvertRequest(BaseModel):
    value: bool


class ScreenModel(BaseModel):
    timestamp_ms: int
    rows: List[str]


class DeviceStatus(BaseModel):
    id: str
    name: str
    spec: str
    initialized: bool
    contrast: float
    contrast_level: int
    invert: bool
    frames_pushed: int
    latencies_ms: List[float]
    writes: List[str]
    screen: Optional[ScreenModel] = None


class DeviceSummary(BaseModel):
    id: str
    name: str
    spec: str
    contrast_level: int
    invert: bool
    frames_pushed: int


class ErrorResponse(BaseModel):
    detail: str
