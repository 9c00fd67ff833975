"""
Processing Package.

Segmentation, oracle annotation, token layout, context extraction and the
in-memory session.
"""
