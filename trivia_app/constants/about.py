"""Static metadata describing VibeQuiz."""

APP_NAME = "VibeQuiz"
APP_VERSION = "0.2"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "VibeQuiz is a small multiplayer trivia service. Signed-in players post "
    "multiple-choice questions, everyone else gets one shot at each of them, "
    "and the feed shows how the crowd did."
)
