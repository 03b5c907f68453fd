from .credentials import CredentialStore, InMemoryCredentialStore, validate_api_key

__all__ = ["CredentialStore", "InMemoryCredentialStore", "validate_api_key"]
