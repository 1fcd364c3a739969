import os
from functools import lru_cache
from cryptography.fernet import Fernet
from dotenv import load_dotenv
from fastapi.logger import logger

load_dotenv()


@lru_cache(maxsize=1)
def get_cipher() -> Fernet:
    """
    Build the Fernet cipher used for personal data snapshots.

    The key comes from ENCRYPTION_KEY; without it a throwaway key is generated,
    which makes previously stored values unreadable after a restart.
    """
    key = os.getenv("ENCRYPTION_KEY")
    if not key:
        key = Fernet.generate_key().decode()
        logger.warning(
            "ENCRYPTION_KEY not found in environment; using a generated key. "
            "Add a persistent key to your .env file.")
    return Fernet(key.encode() if isinstance(key, str) else key)


def encrypt_data(data: str) -> str:
    """
    Encrypt sensitive data

    Args:
        data: The string data to encrypt

    Returns:
        Encrypted string
    """
    if not data:
        return ""
    return get_cipher().encrypt(data.encode()).decode()


def decrypt_data(encrypted_data: str) -> str:
    """
    Decrypt sensitive data

    Args:
        encrypted_data: The encrypted string to decrypt

    Returns:
        Decrypted string
    """
    if not encrypted_data:
        return ""
    return get_cipher().decrypt(encrypted_data.encode()).decode()
