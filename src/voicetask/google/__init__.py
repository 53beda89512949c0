from voicetask.google.maps import (
    LookupResult,
    LookupStatus,
    MapsClient,
    PlaceCandidate,
    TravelTime,
)

__all__ = [
    "LookupResult",
    "LookupStatus",
    "MapsClient",
    "PlaceCandidate",
    "TravelTime",
]
