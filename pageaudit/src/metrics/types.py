"""Result models produced by metric audits."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MetricResult(BaseModel):
    """
    Scored timing metric.

    raw_value and score are None when the metric could not be computed;
    debug_string then names the fallback stage that failed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    raw_value: Optional[float] = Field(
        default=None,
        ge=0,
        alias="rawValue",
        description="Milliseconds since navigation start.",
    )
    score: Optional[float] = Field(
        default=None,
        ge=0,
        le=1,
        description="Curve score rounded to two decimals.",
    )
    display_value: str = Field(default="", alias="displayValue")
    debug_string: Optional[str] = Field(default=None, alias="debugString")

    @property
    def available(self) -> bool:
        return self.raw_value is not None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
