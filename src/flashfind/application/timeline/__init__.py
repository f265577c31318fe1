"""Timeline views over the gallery."""

from .grouping import compute_statistics, format_day, group_by_day

__all__ = ["group_by_day", "compute_statistics", "format_day"]
