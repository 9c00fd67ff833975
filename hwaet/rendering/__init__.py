"""
Rendering Package.

HTML gloss view and JSON/CSV exports.
"""
