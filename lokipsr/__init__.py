"""Building blocks for pulsar searching: threshold-scheme simulation, suggestion buffers, statistics and numeric utilities."""

__version__ = "0.0.1"

__all__ = [
    "cartesian",
    "errors",
    "schemes",
    "stats",
    "suggestions",
    "thresholds",
    "timing",
    "utils",
]