"""Document store layer.

This module connects to the target document store and exposes
the asynchronous insert used by the write dispatcher.
"""
