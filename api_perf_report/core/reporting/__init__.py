from .renderer import RenderedReports, ReportRenderer, build_sections
from .thresholds import Status

__all__ = ["RenderedReports", "ReportRenderer", "Status", "build_sections"]
