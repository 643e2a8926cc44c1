"""Celery tasks, one module per unit-of-work type."""
