"""Shared game data layer: models and read-only repositories."""
