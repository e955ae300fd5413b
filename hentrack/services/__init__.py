"""
High-level use cases for the HenTrack backend.

The flock store owns the records; statistics, display metadata, tips and form
parsing are small helpers around it. Routers call these services instead of
touching storage adapters directly.
"""
