"""Image preparation and detection decoding for D-FINE style object detectors."""

__version__ = "0.1.0"
__all__ = ["imaging", "labels", "messages", "model"]