"""Cairo felt serialization, model schemas, tag naming, layout unpacking and workspace paths for Dojo worlds."""

__version__ = "0.1.0"