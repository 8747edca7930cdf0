"""Metadata package export pipeline."""

__version__ = "0.1.0"
