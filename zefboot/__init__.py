"""Cluster bootstrap: generate, publish and discover validator configuration."""

__version__ = "0.1.0"
