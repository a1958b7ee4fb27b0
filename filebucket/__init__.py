"""
Filebucket - a small file manager backed by an S3-compatible bucket.

This package contains the complete application:
- core: Listing, upload and delete logic
- infrastructure: Object storage clients (boto3 and in-memory)
- api: FastAPI routes, dependencies and error mapping
- config: Application configuration
- public: Bundled front-end served at /
"""

__version__ = "0.1.0"
