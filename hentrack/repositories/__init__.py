"""
Persistence adapters.

Every adapter is an opaque key-value byte store exposing ``get(key)`` and
``set(key, value)``. Encoding records to bytes is the codec's job (see
``codec.py`` and ``state.py``); adapters never look inside the payloads.
"""
