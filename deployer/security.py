import hmac
from .settings import settings

class AuthorizationError(Exception):
    pass

def verify_secret(secret: str) -> bool:
    if not settings.EXPECTED_SECRET:
        return False
    return hmac.compare_digest(secret.encode(), settings.EXPECTED_SECRET.encode())

def authorize(secret: str) -> None:
    if not verify_secret(secret):
        raise AuthorizationError("Invalid secret")
