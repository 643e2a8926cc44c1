"""Core domain errors."""
