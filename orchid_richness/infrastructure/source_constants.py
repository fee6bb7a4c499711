"""
Source column constants.

The occurrence table follows the Darwin Core column names used by GBIF
exports. Centralizing them keeps the loader and its tests in agreement on
the contract.
"""


class OccurrenceColumns:
    """Darwin Core attribute columns of the occurrence table."""

    SPECIES = "species"
    LOCALITY = "locality"
    EVENT_DATE = "eventDate"
    INSTITUTION_CODE = "institutionCode"
    OCCURRENCE_ID = "occurrenceID"

    # Source column -> OrchidOccurrence field
    ATTRIBUTE_FIELDS = {
        SPECIES: "species",
        LOCALITY: "locality",
        EVENT_DATE: "event_date",
        INSTITUTION_CODE: "institution_code",
        OCCURRENCE_ID: "occurrence_id",
    }

    @classmethod
    def attribute_columns(cls) -> list[str]:
        """
        Get the attribute columns in the order they are read.

        Returns:
            List of source column names
        """
        return list(cls.ATTRIBUTE_FIELDS)


class CoordinateBounds:
    """Valid ranges for geographic coordinates in degrees."""

    MIN_LONGITUDE = -180.0
    MAX_LONGITUDE = 180.0
    MIN_LATITUDE = -90.0
    MAX_LATITUDE = 90.0

    @classmethod
    def contains(cls, longitude: float, latitude: float) -> bool:
        return (
            cls.MIN_LONGITUDE <= longitude <= cls.MAX_LONGITUDE
            and cls.MIN_LATITUDE <= latitude <= cls.MAX_LATITUDE
        )


# Geometry types accepted for conservation areas
POLYGONAL_GEOMETRY_TYPES = ("Polygon", "MultiPolygon")
