"""alertrelay: forward alert events to the VictorOps REST endpoint."""

__version__ = "0.1.0"
