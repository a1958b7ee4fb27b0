"""
Infrastructure layer - external service integrations.

- storage: Object storage (Tigris/S3)

These wrappers translate between boto3 responses and our domain models.
"""
