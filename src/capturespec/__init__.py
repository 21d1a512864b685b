"""capturespec: turns schema-registry artifacts into data capture specifications."""

__version__ = "0.1.0"
