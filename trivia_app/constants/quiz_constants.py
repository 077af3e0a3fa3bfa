"""Quiz-related constants shared across the core and API layers."""

CHOICE_KEYS: tuple[str, ...] = ("a", "b", "c", "d")
MIN_QUESTION_TEXT_LENGTH: int = 10

QUESTION_RETENTION_SECONDS: int = 24 * 60 * 60
RECENT_ANSWERERS_LIMIT: int = 10
DISPLAYED_ANSWERERS_LIMIT: int = 5

EASY_THRESHOLD_PERCENT: int = 80
MEDIUM_THRESHOLD_PERCENT: int = 50

ALREADY_ANSWERED_MESSAGE: str = "You've already answered this question!"
QUESTION_NOT_FOUND_MESSAGE: str = "Question not found"
CORRECT_MESSAGE: str = "Correct! 🎉"
INCORRECT_MESSAGE: str = "Incorrect, but nice try! 💪"
CORRECT_ENCOURAGEMENT: str = "Great job! You got it right! 🎉"
INCORRECT_ENCOURAGEMENT: str = "Nice try! Every attempt makes you smarter! 💪"
QUESTION_CREATED_MESSAGE: str = "Question created successfully! 🎉"
