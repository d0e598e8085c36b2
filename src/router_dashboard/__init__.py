"""Grafana dashboard generator for Router Monitor."""

__version__ = "0.1.0"
