"""
Application configuration using Pydantic settings.
"""
import logging

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables."""

    # Input sources
    polygon_path: str = Field(
        default="datos/areas_conservacion.gpkg",
        description="Vector file with the conservation area polygons"
    )
    occurrence_path: str = Field(
        default="datos/orquideas.csv",
        description="Delimited table with the orchid occurrence records"
    )

    # Source layout
    area_name_field: str = Field(
        default="nombre_ac",
        description="Polygon attribute holding the conservation area name"
    )
    longitude_field: str = Field(
        default="decimalLongitude",
        description="Occurrence column holding longitude in degrees"
    )
    latitude_field: str = Field(
        default="decimalLatitude",
        description="Occurrence column holding latitude in degrees"
    )
    occurrence_separator: str = Field(
        default="\t",
        description="Field separator of the occurrence table (GBIF exports are tab separated)"
    )

    # Processing
    repair_invalid_geometry: bool = Field(
        default=False,
        description="Repair invalid polygons with make_valid instead of failing the load"
    )
    top_species_limit: int = Field(
        default=10,
        ge=0,
        description="Number of species kept in the occurrence ranking"
    )
    include_blank_species: bool = Field(
        default=False,
        description="Count records without a species name in the ranking"
    )
    blank_species_label: str = Field(
        default="(sin especie)",
        description="Ranking label for records without a species name"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Application Settings
    app_name: str = Field(
        default="Riqueza de orquideas en areas de conservacion",
        description="Report name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Report generator version"
    )

    class Config:
        env_prefix = "ORCHID_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for a report run."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# Global settings instance
settings = Settings()
