"""HenTrack: poultry breeding records (hens, notes, photos, breeding, incubation, hatching)."""

__version__ = "1.0.0"
