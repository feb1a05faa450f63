from cryptography.fernet import Fernet, InvalidToken

__all__ = ["InvalidToken", "decrypt_token", "encrypt_token", "get_fernet"]


def get_fernet(master_key: str | None) -> Fernet:
    if not master_key:
        raise RuntimeError("MASTER_KEY is not set; it is required to store the Buxfer token")
    try:
        return Fernet(master_key.encode())
    except ValueError as e:
        raise RuntimeError(f"MASTER_KEY is not a valid Fernet key: {e}") from e


def encrypt_token(token: str, master_key: str | None) -> str:
    f = get_fernet(master_key)
    return f.encrypt(token.encode()).decode()


def decrypt_token(token_enc: str, master_key: str | None) -> str:
    f = get_fernet(master_key)
    return f.decrypt(token_enc.encode()).decode()
