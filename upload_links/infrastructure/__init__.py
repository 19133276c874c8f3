"""
Infrastructure layer - external service integrations.

- storage: Blob storage (Azure Blob Storage / Azurite) and token signing

These wrappers translate between the SDK's types and our domain models.
"""
