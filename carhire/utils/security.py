import hashlib
import hmac

from werkzeug.security import generate_password_hash, check_password_hash


def generate_hash(password: str) -> str:
    return generate_password_hash(password)


def check_hash(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return check_password_hash(hashed, password)
    except ValueError:
        return False


def same_secret(provided: str, expected: str) -> bool:
    """Constant-time comparison of two strings of any length."""
    a = hashlib.sha256((provided or "").encode("utf-8")).digest()
    b = hashlib.sha256((expected or "").encode("utf-8")).digest()
    return hmac.compare_digest(a, b)
