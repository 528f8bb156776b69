import math

from pydantic import BaseModel, ConfigDict


class Location(BaseModel):
    """
    A geographic location picked through the geocoding search.

    Attributes:\n
        latitude (float): Latitude in decimal degrees.
        longitude (float): Longitude in decimal degrees.
        name (str): Human readable display name of the location.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = 0.0
    longitude: float = 0.0
    name: str = ""

    @classmethod
    def from_document(cls, data: object) -> "Location":
        """
        Build a location from a stored `{latitude, longitude, name}` map.
        Missing or malformed values fall back to the empty location's values.
        """
        if not isinstance(data, dict):
            return EMPTY_LOCATION

        latitude = data.get("latitude")
        longitude = data.get("longitude")
        name = data.get("name")

        return cls(
            latitude=float(latitude) if isinstance(latitude, (int, float)) and not isinstance(latitude, bool) else 0.0,
            longitude=(
                float(longitude) if isinstance(longitude, (int, float)) and not isinstance(longitude, bool) else 0.0
            ),
            name=name if isinstance(name, str) else "",
        )

    def to_document(self) -> dict[str, float | str]:
        return {"latitude": self.latitude, "longitude": self.longitude, "name": self.name}


EMPTY_LOCATION = Location(latitude=0.0, longitude=0.0, name="")

EPFL_LOCATION = Location(
    latitude=46.5191,
    longitude=6.5668,
    name="École Polytechnique Fédérale de Lausanne (EPFL), Switzerland",
)


def is_valid_location(location: Location) -> bool:
    """
    A location may be shown on the map when it has a name and both
    coordinates are finite. Coordinates are not range checked.
    """
    return bool(location.name.strip()) and math.isfinite(location.latitude) and math.isfinite(location.longitude)
