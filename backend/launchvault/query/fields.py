"""Allow-lists mapping public query-string keys onto launch document paths."""

from typing import Literal, NamedTuple

FieldKind = Literal["int", "float", "bool", "str", "date"]


class FieldSpec(NamedTuple):
    path: str
    kind: FieldKind


FILTER_FIELDS: dict[str, FieldSpec] = {
    # Launch
    "flight_number": FieldSpec("flight_number", "int"),
    "mission_name": FieldSpec("mission_name", "str"),
    "launch_year": FieldSpec("launch_year", "str"),
    "launch_date_utc": FieldSpec("launch_date_utc", "date"),
    "launch_date_local": FieldSpec("launch_date_local", "str"),
    "tbd": FieldSpec("tbd", "bool"),
    "tentative": FieldSpec("is_tentative", "bool"),
    "tentative_max_precision": FieldSpec("tentative_max_precision", "str"),
    "launch_success": FieldSpec("launch_success", "bool"),
    "upcoming": FieldSpec("upcoming", "bool"),
    "ship": FieldSpec("ships", "str"),
    # Rocket
    "rocket_id": FieldSpec("rocket.rocket_id", "str"),
    "rocket_name": FieldSpec("rocket.rocket_name", "str"),
    "rocket_type": FieldSpec("rocket.rocket_type", "str"),
    # First stage cores
    "core_serial": FieldSpec("rocket.first_stage.cores.core_serial", "str"),
    "block": FieldSpec("rocket.first_stage.cores.block", "int"),
    "core_flight": FieldSpec("rocket.first_stage.cores.flight", "int"),
    "core_reuse": FieldSpec("rocket.first_stage.cores.reused", "bool"),
    "gridfins": FieldSpec("rocket.first_stage.cores.gridfins", "bool"),
    "legs": FieldSpec("rocket.first_stage.cores.legs", "bool"),
    "land_success": FieldSpec("rocket.first_stage.cores.land_success", "bool"),
    "landing_intent": FieldSpec("rocket.first_stage.cores.landing_intent", "bool"),
    "landing_type": FieldSpec("rocket.first_stage.cores.landing_type", "str"),
    "landing_vehicle": FieldSpec("rocket.first_stage.cores.landing_vehicle", "str"),
    # Fairings
    "fairings_reused": FieldSpec("rocket.fairings.reused", "bool"),
    "fairings_recovery_attempt": FieldSpec("rocket.fairings.recovery_attempt", "bool"),
    "fairings_recovered": FieldSpec("rocket.fairings.recovered", "bool"),
    "fairings_ship": FieldSpec("rocket.fairings.ship", "str"),
    # Second stage payloads
    "cap_serial": FieldSpec("rocket.second_stage.payloads.cap_serial", "str"),
    "payload_id": FieldSpec("rocket.second_stage.payloads.payload_id", "str"),
    "norad_id": FieldSpec("rocket.second_stage.payloads.norad_id", "int"),
    "customer": FieldSpec("rocket.second_stage.payloads.customers", "str"),
    "nationality": FieldSpec("rocket.second_stage.payloads.nationality", "str"),
    "manufacturer": FieldSpec("rocket.second_stage.payloads.manufacturer", "str"),
    "payload_type": FieldSpec("rocket.second_stage.payloads.payload_type", "str"),
    "payload_mass_kg": FieldSpec("rocket.second_stage.payloads.payload_mass_kg", "float"),
    "orbit": FieldSpec("rocket.second_stage.payloads.orbit", "str"),
    "reference_system": FieldSpec(
        "rocket.second_stage.payloads.orbit_params.reference_system", "str"
    ),
    "regime": FieldSpec("rocket.second_stage.payloads.orbit_params.regime", "str"),
    # Launch site
    "site_id": FieldSpec("launch_site.site_id", "str"),
    "site_name": FieldSpec("launch_site.site_name", "str"),
    "site_name_long": FieldSpec("launch_site.site_name_long", "str"),
}

# start/end bound launch_date_utc inclusively
RANGE_FIELDS: dict[str, tuple[str, str]] = {
    "start": ("launch_date_utc", "$gte"),
    "end": ("launch_date_utc", "$lte"),
}

SORT_FIELDS: dict[str, str] = {
    "flight_number": "flight_number",
    "mission_name": "mission_name",
    "launch_year": "launch_year",
    "launch_date_utc": "launch_date_utc",
    "launch_date_unix": "launch_date_unix",
    "launch_date_local": "launch_date_local",
    "launch_success": "launch_success",
    "upcoming": "upcoming",
    "rocket_id": "rocket.rocket_id",
    "rocket_name": "rocket.rocket_name",
    "site_id": "launch_site.site_id",
    "site_name": "launch_site.site_name",
}

RESERVED_KEYS = frozenset({"sort", "order", "limit", "offset", "fields", "id"})

# Never returned to API consumers
INTERNAL_FIELDS = ("reuse",)
