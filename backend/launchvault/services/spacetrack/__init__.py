from .client import SpaceTrackClient, create_spacetrack_client
from .config import SpaceTrackConfig
from .exceptions import SpaceTrackAPIError, SpaceTrackAuthError
from .models import OrbitalElementSnapshot, OrbitParams

__all__ = [
    "SpaceTrackClient",
    "create_spacetrack_client",
    "SpaceTrackConfig",
    "SpaceTrackAPIError",
    "SpaceTrackAuthError",
    "OrbitalElementSnapshot",
    "OrbitParams",
]
