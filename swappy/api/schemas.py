"""Pydantic response models for API."""

from typing import Literal

from pydantic import BaseModel


class AudioAnalysisResponse(BaseModel):
    duration: float
    sample_rate: int
    channels: int
    beats: list[float]
    bpm: float | None = None
    transients: list[float] = []


# WebSocket message types

class TransientMessage(BaseModel):
    type: str = "transient"
    time: float


class ErrorMessage(BaseModel):
    type: str = "error"
    message: str


class SetThresholdMessage(BaseModel):
    type: Literal["set_threshold"] = "set_threshold"
    value: float
