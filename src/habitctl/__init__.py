"""habitctl — habit schedule, streak, and heatmap engine."""

__version__ = "0.1.0"
