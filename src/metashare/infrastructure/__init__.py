"""Adapters, configuration, logging and CLI."""
