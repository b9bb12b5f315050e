"""
Configuration models using Pydantic for validation.
"""
from typing import Any, Dict, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Valuation Assumptions
# =============================================================================

class Assumptions(BaseModel):
    """
    Valuation assumptions used by the intrinsic value and projection models.

    Wire names are camelCase (``discountRate``, ``exitPE``...); Python code uses
    the snake_case attribute names. Instances are frozen: build a new one with
    ``with_overrides`` instead of mutating.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    discount_rate: float = Field(default=0.10, gt=-1.0, le=1.0, alias="discountRate",
                                 description="Annual discount rate")
    base_growth: float = Field(default=0.12, ge=0.0, le=1.0, alias="baseGrowth",
                               description="Fallback long-term EPS growth")
    high_growth: float = Field(default=0.18, gt=-1.0, le=1.0, alias="highGrowth",
                               description="Optimistic EPS growth")
    low_growth: float = Field(default=0.08, gt=-1.0, le=1.0, alias="lowGrowth",
                              description="Conservative EPS growth")
    years: int = Field(default=5, ge=1, le=50, alias="years",
                       description="Projection years for the DCF terminal value")
    exit_pe: float = Field(default=15.0, ge=0.0, le=1000.0, alias="exitPE",
                           description="Terminal P/E multiple")
    dividend_payout_ratio: float = Field(default=0.15, ge=0.0, le=1.0, alias="dividendPayoutRatio",
                                         description="Fraction of EPS treated as cash flow")

    @classmethod
    def field_name_for(cls, key: str) -> Optional[str]:
        """Resolve a camelCase alias or snake_case name to the attribute name."""
        for name, field in cls.model_fields.items():
            if key == name or key == field.alias:
                return name
        return None

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "Assumptions":
        """
        Return a new Assumptions with the given overrides merged over this one.

        Unknown keys and None values are ignored. The merged values are
        validated again, so out-of-range overrides raise ``ValidationError``.
        """
        values: Dict[str, Any] = self.model_dump()
        for key, value in (overrides or {}).items():
            name = self.field_name_for(key)
            if name is None or value is None:
                continue
            values[name] = value
        return type(self).model_validate(values)

    def to_wire(self) -> Dict[str, Any]:
        """Dump with camelCase keys for JSON responses."""
        return self.model_dump(by_alias=True)


DEFAULT_ASSUMPTIONS = Assumptions()
