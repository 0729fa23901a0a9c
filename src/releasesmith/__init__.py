"""
releasesmith: cross-platform release builds with Velopack packaging and GitHub publishing.
"""
