"""
utils/ - Shared Helpers
=======================
Logging setup and random secret generation used across all layers.
"""
