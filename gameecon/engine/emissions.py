"""
Emissions & Compliance Engine.

Factor-based greenhouse-gas roll-up for an energy company's annual
activity. Emission factors are kg CO2e per unit of production:

- Scope 1 (direct): on-site generation, oil & gas extraction, refining,
  fugitive methane (x GWP 25)
- Scope 2 (indirect): purchased electricity at the grid-average factor
- Scope 3 (value chain): downstream combustion of sold crude and gas

Totals are reported in metric tonnes. Regulatory thresholds apply to
Scope 1, the emissions a facility permit actually covers.
"""

from dataclasses import dataclass

import structlog

from gameecon.common.numeric import round_pct, safe_ratio
from gameecon.schemas.emissions import EmissionSources
from gameecon.schemas.enums import FuelType

logger = structlog.get_logger(__name__)

# ── Configuration (emission factors, kg CO2e per unit) ───────────────────

GENERATION_FACTORS_PER_MWH: dict[FuelType, float] = {
    FuelType.COAL: 950.0,
    FuelType.NATURAL_GAS: 450.0,
    FuelType.OIL: 780.0,
    FuelType.NUCLEAR: 0.0,
    FuelType.HYDRO: 0.0,
    FuelType.WIND: 0.0,
    FuelType.SOLAR: 0.0,
}
RENEWABLE_FUELS: frozenset[FuelType] = frozenset({
    FuelType.HYDRO,
    FuelType.WIND,
    FuelType.SOLAR,
})

OIL_EXTRACTION_PER_BARREL: float = 64.0
GAS_EXTRACTION_PER_MCF: float = 7.0
REFINING_PER_BARREL: float = 20.0
METHANE_GWP: float = 25.0                 # tonnes CO2e per tonne CH4
GRID_FACTOR_PER_MWH: float = 386.0
SOLD_CRUDE_COMBUSTION_PER_BARREL: float = 430.0
SOLD_GAS_COMBUSTION_PER_MCF: float = 54.4

KG_PER_TONNE: float = 1000.0

DEFAULT_GHG_REPORTING_THRESHOLD: float = 25_000.0
DEFAULT_CAP_AND_TRADE_THRESHOLD: float = 50_000.0
DEFAULT_MAJOR_SOURCE_THRESHOLD: float = 100_000.0


@dataclass(frozen=True)
class EmissionsBySource:
    """Scope 1 broken down by activity, tonnes CO2e."""
    power_generation: float
    oil_gas_extraction: float
    refining: float
    fugitive: float


@dataclass(frozen=True)
class ComplianceFlags:
    ghg_reporting_required: bool
    cap_and_trade_covered: bool
    major_source_permit_required: bool


@dataclass(frozen=True)
class EmissionsReport:
    scope1: float
    scope2: float
    scope3: float
    total: float
    by_source: EmissionsBySource
    compliance: ComplianceFlags
    renewable_share: float       # percent of own generation


class EmissionsEngine:
    def __init__(
        self,
        ghg_reporting_threshold: float = DEFAULT_GHG_REPORTING_THRESHOLD,
        cap_and_trade_threshold: float = DEFAULT_CAP_AND_TRADE_THRESHOLD,
        major_source_threshold: float = DEFAULT_MAJOR_SOURCE_THRESHOLD,
    ):
        self.ghg_reporting_threshold = ghg_reporting_threshold
        self.cap_and_trade_threshold = cap_and_trade_threshold
        self.major_source_threshold = major_source_threshold

    def compliance_flags(self, scope1_tonnes: float) -> ComplianceFlags:
        return ComplianceFlags(
            ghg_reporting_required=scope1_tonnes >= self.ghg_reporting_threshold,
            cap_and_trade_covered=scope1_tonnes >= self.cap_and_trade_threshold,
            major_source_permit_required=scope1_tonnes >= self.major_source_threshold,
        )

    def calculate_emissions(self, sources: EmissionSources) -> EmissionsReport:
        """
        Scope 1/2/3 roll-up in tonnes CO2e.

        Compliance flags are evaluated on Scope 1 only; Scope 2 and 3
        never trigger reporting, cap-and-trade or permit thresholds.
        """
        generation_kg = sum(
            plant.generation_mwh * GENERATION_FACTORS_PER_MWH[plant.fuel_type]
            for plant in sources.power_plants
        )
        extraction_kg = (
            sum(w.production_barrels for w in sources.oil_wells) * OIL_EXTRACTION_PER_BARREL
            + sum(f.production_mcf for f in sources.gas_fields) * GAS_EXTRACTION_PER_MCF
        )
        refining_kg = sum(r.throughput_barrels for r in sources.refineries) * REFINING_PER_BARREL

        by_source = EmissionsBySource(
            power_generation=round_pct(generation_kg / KG_PER_TONNE),
            oil_gas_extraction=round_pct(extraction_kg / KG_PER_TONNE),
            refining=round_pct(refining_kg / KG_PER_TONNE),
            fugitive=round_pct(sources.methane_leak_tons * METHANE_GWP),
        )

        scope1 = (generation_kg + extraction_kg + refining_kg) / KG_PER_TONNE
        scope1 += sources.methane_leak_tons * METHANE_GWP
        scope2 = sources.purchased_electricity_mwh * GRID_FACTOR_PER_MWH / KG_PER_TONNE
        scope3 = (
            sources.sold_crude_barrels * SOLD_CRUDE_COMBUSTION_PER_BARREL
            + sources.sold_gas_mcf * SOLD_GAS_COMBUSTION_PER_MCF
        ) / KG_PER_TONNE

        total_generation = sum(p.generation_mwh for p in sources.power_plants)
        renewable_generation = sum(
            p.generation_mwh for p in sources.power_plants if p.fuel_type in RENEWABLE_FUELS
        )

        compliance = self.compliance_flags(scope1)
        if compliance.ghg_reporting_required:
            logger.debug(
                "emissions_threshold_crossed",
                scope1_tonnes=round_pct(scope1),
                cap_and_trade=compliance.cap_and_trade_covered,
                major_source=compliance.major_source_permit_required,
            )

        return EmissionsReport(
            scope1=round_pct(scope1),
            scope2=round_pct(scope2),
            scope3=round_pct(scope3),
            total=round_pct(scope1 + scope2 + scope3),
            by_source=by_source,
            compliance=compliance,
            renewable_share=round_pct(safe_ratio(renewable_generation, total_generation) * 100),
        )
