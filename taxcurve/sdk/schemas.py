"""Pydantic schemas for tax and inflation tables.

These schemas validate the tax-rules/*.yaml files and provide typed,
read-only access to the parameters the engines evaluate.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TaxScheduleParams(BaseModel):
    """Parameters of the five-zone income tax function for one year.

    Thresholds (Eckwerte) are upper bounds of their zone, not lower bounds.
    S1..S3 are the tax owed exactly at E1..E3; they are taken as given and
    only the threshold ordering is enforced here.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., description="Year the parameters apply to")
    e0: float = Field(..., ge=0, description="Upper bound of the null zone (Grundfreibetrag)")
    e1: float = Field(..., description="Upper bound of progression zone 1")
    e2: float = Field(..., description="Upper bound of progression zone 2")
    e3: float = Field(..., description="Upper bound of proportional zone 1")
    s1: float = Field(..., description="Tax owed at E1")
    s2: float = Field(..., description="Tax owed at E2")
    s3: float = Field(..., description="Tax owed at E3")
    p1: float = Field(..., description="Progression factor in zone 1")
    p2: float = Field(..., description="Progression factor in zone 2")
    sg1: float = Field(..., description="Initial marginal rate in zone 1")
    sg2: float = Field(..., description="Initial marginal rate in zone 2")
    sg3: float = Field(..., description="Marginal rate in proportional zone 1")
    sg4: float = Field(..., description="Marginal rate in proportional zone 2")

    @model_validator(mode="after")
    def check_threshold_order(self) -> "TaxScheduleParams":
        """Thresholds must be strictly ascending."""
        if not (self.e0 < self.e1 < self.e2 < self.e3):
            raise ValueError(
                f"thresholds must be strictly ascending: "
                f"e0={self.e0}, e1={self.e1}, e2={self.e2}, e3={self.e3}"
            )
        return self


class InflationTable(BaseModel):
    """Yearly inflation rates and one-time currency conversion factors.

    The rate for year Y is the price change from Y-1 to Y, in percent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    rates: Dict[int, float] = Field(..., description="Year -> annual inflation rate in percent")
    conversions: Dict[int, float] = Field(
        default_factory=dict,
        description="Year -> currency conversion factor applied when entering that year",
    )

    @field_validator("rates")
    @classmethod
    def check_contiguous(cls, rates: Dict[int, float]) -> Dict[int, float]:
        if not rates:
            raise ValueError("rates must contain at least one year")
        years = sorted(rates)
        missing = sorted(set(range(years[0], years[-1] + 1)) - set(years))
        if missing:
            raise ValueError(f"rates must cover contiguous years, missing: {missing}")
        return dict(sorted(rates.items()))

    @field_validator("conversions")
    @classmethod
    def check_positive(cls, conversions: Dict[int, float]) -> Dict[int, float]:
        for year, factor in conversions.items():
            if factor <= 0:
                raise ValueError(f"conversion factor for {year} must be positive, got {factor}")
        return dict(sorted(conversions.items()))
