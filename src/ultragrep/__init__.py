"""Time-windowed grep across host-sharded, day-sharded log files."""

__version__ = "0.3.0"
