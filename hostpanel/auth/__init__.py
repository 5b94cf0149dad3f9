from .credential_store import CredentialStore, check_password, hash_password
from .tokens import TokenService, generate_secret
from .authenticator import Authenticator
from .throttle import LoginThrottle

__all__ = [
    "CredentialStore",
    "check_password",
    "hash_password",
    "TokenService",
    "generate_secret",
    "Authenticator",
    "LoginThrottle",
]
