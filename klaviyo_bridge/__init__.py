"""
Klaviyo bridge.

Relays commerce events from the shop to Klaviyo through background jobs.
"""

__version__ = "0.1.0"
