"""Key layout and connection defaults for the key-value store."""

DEFAULT_KEY_PREFIX: str = "vibequiz:"
DEFAULT_REDIS_PORT: int = 6379
DEFAULT_REDIS_DB: int = 0
DEFAULT_SOCKET_TIMEOUT_SECONDS: float = 5.0

QUESTION_KEY: str = "question:{question_id}"
RECENT_QUESTIONS_KEY: str = "questions:recent"
QUESTIONS_BY_USER_KEY: str = "questions:by-user:{user_id}"
ANSWER_KEY: str = "answer:{answer_id}"
ANSWERS_BY_QUESTION_KEY: str = "answers:by-question:{question_id}"
ANSWERS_BY_USER_KEY: str = "answers:by-user:{user_id}"
USER_ANSWERED_KEY: str = "user-answered:{user_id}:{question_id}"
