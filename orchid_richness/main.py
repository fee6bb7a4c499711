"""
Report generation entry point.

Invoked as a library call by the process that renders the static report.
"""
from pathlib import Path
from typing import Optional, Union
import logging

from orchid_richness.config import Settings, configure_logging, settings as default_settings
from orchid_richness.domain.exceptions import CRSMismatchError, LoadError
from orchid_richness.presentation.models import PresentationConfig, RichnessReport
from orchid_richness.presentation.report_builder import ReportBuilder
from orchid_richness.services.application.richness_service import RichnessReportService

logger = logging.getLogger(__name__)


def generate_report(
    polygon_path: Optional[Union[str, Path]] = None,
    occurrence_path: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
    presentation: Optional[PresentationConfig] = None,
) -> RichnessReport:
    """
    Run the full pipeline and build the report payload.
    
    Args:
        polygon_path: Conservation area vector file (defaults to settings)
        occurrence_path: Occurrence table (defaults to settings)
        settings: Pipeline settings (defaults to global settings)
        presentation: Map view, palette and chart titles
        
    Returns:
        RichnessReport for the presentation layer
        
    Raises:
        LoadError: If a source cannot be read; no report is produced
        CRSMismatchError: If the polygons cannot be normalized to WGS84
    """
    settings = settings or default_settings
    configure_logging(settings.log_level)
    
    polygon_path = polygon_path or settings.polygon_path
    occurrence_path = occurrence_path or settings.occurrence_path
    
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Sources: areas={polygon_path}, occurrences={occurrence_path}")
    
    service = RichnessReportService.from_settings(settings)
    
    try:
        result = service.run(polygon_path, occurrence_path)
    except LoadError as e:
        logger.error(
            f"Load failed: {e.message}",
            extra={"source": e.source, "row": e.row},
        )
        raise
    except CRSMismatchError as e:
        logger.error(f"CRS normalization failed: {e}")
        raise
    
    report = ReportBuilder(presentation).build(result, title=settings.app_name)
    logger.info("Report payload ready")
    return report
