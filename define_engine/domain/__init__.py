"""Domain layer for the Define-XML metadata engine.

This layer holds the metadata entities and the pure state transitions
that keep them consistent. It does no I/O and never logs.
"""
