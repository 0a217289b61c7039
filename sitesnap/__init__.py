"""sitesnap: point-in-time, browsable local snapshots of websites."""

__version__ = "0.1.0"
