"""
Compute / Model Marketplace Schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field


class BenchmarkScores(BaseModel):
    accuracy: float = Field(default=80.0, ge=0, le=100)          # percent
    inference_latency: float = Field(default=100.0, ge=0)        # milliseconds
    throughput: Optional[float] = Field(default=None, ge=0)      # requests / second


class PerformanceGuarantee(BaseModel):
    min_accuracy: Optional[float] = Field(default=None, ge=0, le=100)
    max_latency: Optional[float] = Field(default=None, ge=0)
    refund_on_breach: bool = False
    refund_percentage: float = Field(default=0.0, ge=0, le=100)
