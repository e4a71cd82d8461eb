"""
Emission Source Schemas: annual production/generation per asset.
"""

from pydantic import BaseModel, Field

from gameecon.schemas.enums import FuelType


class PowerPlantOutput(BaseModel):
    asset_id: str = ""
    fuel_type: FuelType
    generation_mwh: float = Field(default=0.0, ge=0)


class OilWellOutput(BaseModel):
    asset_id: str = ""
    production_barrels: float = Field(default=0.0, ge=0)


class GasFieldOutput(BaseModel):
    asset_id: str = ""
    production_mcf: float = Field(default=0.0, ge=0)


class RefineryOutput(BaseModel):
    asset_id: str = ""
    throughput_barrels: float = Field(default=0.0, ge=0)


class EmissionSources(BaseModel):
    """One company's annual activity, grouped by asset class."""
    power_plants: list[PowerPlantOutput] = Field(default_factory=list)
    oil_wells: list[OilWellOutput] = Field(default_factory=list)
    gas_fields: list[GasFieldOutput] = Field(default_factory=list)
    refineries: list[RefineryOutput] = Field(default_factory=list)
    methane_leak_tons: float = Field(default=0.0, ge=0)
    purchased_electricity_mwh: float = Field(default=0.0, ge=0)
    sold_crude_barrels: float = Field(default=0.0, ge=0)
    sold_gas_mcf: float = Field(default=0.0, ge=0)
