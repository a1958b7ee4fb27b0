"""
Core file-handling logic.

This module is framework-agnostic - it doesn't import FastAPI. It talks
to storage only through the StorageClient protocol, so the listing and
upload rules can be tested against the in-memory client.
"""
