"""
db/ - Database Layer
====================
Handles PostgreSQL connections, schema initialization, and the raw
parameterized query helpers the repositories are built on.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
