from pydantic import BaseModel


class SpaceTrackConfig(BaseModel):
    """Configuration for Space-Track API client."""

    base_url: str = "https://www.space-track.org"
    login_path: str = "/ajaxauth/login"
    query_path: str = "/basicspacedata/query"
    epoch_days: int = 30
    timeout_seconds: float = 60.0
    max_connections: int = 10

    @property
    def latest_elements_path(self) -> str:
        """Bulk query for the newest element set of every object seen recently."""
        return (
            f"{self.query_path}/class/tle_latest/ORDINAL/1"
            f"/orderby/NORAD_CAT_ID/epoch/>now-{self.epoch_days}/format/json"
        )
