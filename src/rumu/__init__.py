"""rumu: a terminal music library browser and player."""

__version__ = "0.1.0"
