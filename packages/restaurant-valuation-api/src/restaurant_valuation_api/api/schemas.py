from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from restaurant_valuation import BusinessModel, OwnerDependency, PremisesType, ProcessDocumentation


class ValuationAssumptions(BaseModel):
    """Optional overrides for the calculator form and the ledger-derived figures."""

    # Financials (normally aggregated from the ledger)
    monthly_revenue: Optional[float] = Field(None, description="Average monthly gross revenue")
    net_margin_percent: Optional[float] = Field(None, description="Net profit margin, percent of revenue")
    operating_years: Optional[float] = Field(None, ge=0, description="Years in operation")
    primary_channel_name: Optional[str] = Field(None, description="Largest sales channel")
    primary_channel_concentration_percent: Optional[float] = Field(
        None, ge=0, le=100, description="Share of revenue from the largest sales channel"
    )

    # Core levers
    annual_growth_percent: Optional[float] = Field(None, ge=0, description="Expected compound annual revenue growth")
    discount_rate_percent: Optional[float] = Field(None, description="Required rate of return, must exceed 3%")
    business_model: Optional[BusinessModel] = Field(None, description="Selects the market multiple range")
    market_multiple: Optional[float] = Field(None, gt=0, description="Multiple of annual profit")
    extraordinary_expenses: Optional[float] = Field(
        None, ge=0, description="One-time deductions (debts, required investments)"
    )

    # Qualitative factors
    owner_dependency: Optional[OwnerDependency] = Field(None, description="How much the business relies on the owner")
    process_documentation: Optional[ProcessDocumentation] = Field(None, description="Are processes documented")
    premises_type: Optional[PremisesType] = Field(None, description="Owned, leased or short-term lease")

    model_config = ConfigDict(extra="forbid")


class ValuationRequest(BaseModel):
    """Request body for the valuation endpoints."""

    restaurant_id: Optional[str] = Field(None, description="Restaurant whose ledger pre-fills the inputs")
    source: Optional[str] = Field(None, description="Data source connector (defaults to the configured source)")
    start: Optional[str] = Field(None, description="Ledger period start (YYYY-MM-DD), defaults to month start")
    end: Optional[str] = Field(None, description="Ledger period end (YYYY-MM-DD), defaults to today")
    restaurant_name: Optional[str] = Field(None, description="Name printed on the report")
    assumptions: Optional[ValuationAssumptions] = Field(None, description="Optional overrides for valuation inputs")

    @model_validator(mode="after")
    def require_data_or_revenue(self) -> "ValuationRequest":
        if self.restaurant_id is None and (self.assumptions is None or self.assumptions.monthly_revenue is None):
            raise ValueError("Provide a restaurant_id or assumptions.monthly_revenue")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "assumptions": {
                    "monthly_revenue": 50000,
                    "net_margin_percent": 15,
                    "annual_growth_percent": 10,
                    "discount_rate_percent": 18,
                    "business_model": "hybrid",
                    "market_multiple": 6,
                    "operating_years": 3,
                    "owner_dependency": "partial",
                    "process_documentation": "partial",
                    "premises_type": "leased",
                },
            }
        }
    )


class MultipleRangeItem(BaseModel):
    business_model: BusinessModel
    minimum: float
    maximum: float
    default: float


class MultipleRangesResponse(BaseModel):
    results: List[MultipleRangeItem]
