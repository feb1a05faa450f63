from .client import BuxferClient, Endpoint, is_ok
from .models import Account, Tag, Transaction

__all__ = ["BuxferClient", "Endpoint", "is_ok", "Account", "Tag", "Transaction"]
