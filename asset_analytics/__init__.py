"""Asset uptime/downtime analytics for maintenance activity logs."""

__version__ = "0.1.0"
