"""
models/ - Domain Models
=======================
Plain dataclasses the repositories return; no database access here.
"""
