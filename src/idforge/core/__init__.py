"""Core identifier layout, clock and error definitions."""
