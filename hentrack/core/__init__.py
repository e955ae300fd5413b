"""
Core utilities shared across the HenTrack backend.

This package hosts:
- configuration helpers (env vars, storage backend, data paths)
- logging setup
- lenient parsing of free-text form values
- the debounced write-back timer used by the flock store
"""
