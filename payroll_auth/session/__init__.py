from .codec import SESSION_MAX_AGE, SessionCodec, SessionPayload
from .middleware import COOKIE_NAME, SessionMiddleware

__all__ = ["SESSION_MAX_AGE", "SessionCodec", "SessionPayload", "COOKIE_NAME", "SessionMiddleware"]
