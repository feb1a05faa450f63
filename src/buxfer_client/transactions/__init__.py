from .encoding import EncodedTransaction, encode_transaction
from .query import TransactionQuery
from .reader import TransactionListing, list_transactions
from .types import TransactionRequest, TransactionStatus, TransactionType
from .writer import add_transaction, submit_encoded

__all__ = [
    "EncodedTransaction",
    "TransactionListing",
    "TransactionQuery",
    "TransactionRequest",
    "TransactionStatus",
    "TransactionType",
    "add_transaction",
    "submit_encoded",
    "encode_transaction",
    "list_transactions",
]
