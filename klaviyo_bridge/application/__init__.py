"""Application layer: actions and caller-facing services."""
