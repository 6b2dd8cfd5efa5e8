"""
pipefilter transformation data models.

These models define the structure of results returned by
transformation plugins to the rendering layer.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TransformStatus(str, Enum):
    """How a transformation result was produced."""

    PASSTHROUGH = "passthrough"  # no programs configured, input returned as-is
    TRANSFORMED = "transformed"


class TransformationResult(BaseModel):
    """Output of a single transformation call."""

    model_config = ConfigDict(frozen=True)

    text: Union[str, bytes] = Field(..., description="Transformed (or passed-through) data")
    no_wrap: bool = Field(default=True, description="Rendering hint: display without wrapping")
    status: TransformStatus = Field(..., description="Whether a program was actually run")
    program: Optional[str] = Field(None, description="Path of the program that was run")
    return_code: Optional[int] = Field(
        None, description="Exit status of the program (informational only)"
    )

    @property
    def is_passthrough(self) -> bool:
        return self.status == TransformStatus.PASSTHROUGH
