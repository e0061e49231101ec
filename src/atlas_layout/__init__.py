"""Layout, labelling, viewport gestures and travel routing for nested game maps."""

__version__ = "0.1.0"
