"""HTTP API for the idforge service."""
