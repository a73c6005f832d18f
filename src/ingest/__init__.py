"""Line ingestion pipeline.

This package splits source byte streams into logical lines, builds
records, and dispatches accepted documents to the store layer.
"""
