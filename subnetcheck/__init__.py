"""subnetcheck: cluster-wide IPv4 subnet compatibility checks."""

__version__ = "0.1.0"
