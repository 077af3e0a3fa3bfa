"""Network configuration constants for the trivia application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_CORS_ORIGINS: str = "*"

USER_ID_HEADER: str = "X-User-ID"
USER_NAME_HEADER: str = "X-User-Name"
USER_EMAIL_HEADER: str = "X-User-Email"
