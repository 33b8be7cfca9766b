from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from launchvault.utils.time_utils import to_iso_utc


class OrbitParams(BaseModel):
    """Typed orbit_params record written onto a payload."""

    epoch: str
    mean_motion: float
    raan: float
    arg_of_pericenter: float
    mean_anomaly: float
    semi_major_axis_km: float
    eccentricity: float
    periapsis_km: float
    apoapsis_km: float
    inclination_deg: float
    period_min: float

    def to_set_document(self, prefix: str) -> dict[str, Any]:
        """Flatten into a $set document under a (positional) path prefix."""
        return {f"{prefix}.{key}": value for key, value in self.model_dump().items()}


class OrbitalElementSnapshot(BaseModel):
    """One element set row from the tle_latest class."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    norad_cat_id: int = Field(alias="NORAD_CAT_ID")
    object_name: str = Field(default="", alias="OBJECT_NAME")
    epoch: str = Field(alias="EPOCH")
    mean_motion: float = Field(alias="MEAN_MOTION")
    ra_of_asc_node: float = Field(alias="RA_OF_ASC_NODE")
    arg_of_pericenter: float = Field(alias="ARG_OF_PERICENTER")
    mean_anomaly: float = Field(alias="MEAN_ANOMALY")
    semimajor_axis: float = Field(alias="SEMIMAJOR_AXIS")
    eccentricity: float = Field(alias="ECCENTRICITY")
    perigee: float = Field(alias="PERIGEE")
    apogee: float = Field(alias="APOGEE")
    inclination: float = Field(alias="INCLINATION")
    period: float = Field(alias="PERIOD")

    @field_validator("norad_cat_id", mode="before")
    @classmethod
    def parse_norad_cat_id(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("epoch", mode="before")
    @classmethod
    def parse_epoch(cls, v: Any) -> str:
        if not isinstance(v, (str, datetime)) or v == "":
            raise ValueError(f"unusable epoch: {v!r}")
        return to_iso_utc(v)

    @field_validator("object_name", mode="before")
    @classmethod
    def parse_object_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> OrbitalElementSnapshot:
        return cls.model_validate(data)

    def to_orbit_params(self) -> OrbitParams:
        return OrbitParams(
            epoch=self.epoch,
            mean_motion=self.mean_motion,
            raan=self.ra_of_asc_node,
            arg_of_pericenter=self.arg_of_pericenter,
            mean_anomaly=self.mean_anomaly,
            semi_major_axis_km=self.semimajor_axis,
            eccentricity=self.eccentricity,
            periapsis_km=self.perigee,
            apoapsis_km=self.apogee,
            inclination_deg=self.inclination,
            period_min=self.period,
        )
