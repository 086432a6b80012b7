"""Curation stages: dedup, orientation split, portrait pairing, biased ordering, interleave.

Each stage exposes a small, pure function API; randomness is passed in as a
``numpy.random.Generator`` and seen-history through a ``SeenTimeStore``.
"""
