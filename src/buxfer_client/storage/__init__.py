from .token_store import StoredToken, TokenStore

__all__ = ["TokenStore", "StoredToken"]
