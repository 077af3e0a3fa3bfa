"""FastAPI server exposing the trivia JSON API."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from trivia_app.config.settings import Settings
from trivia_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from trivia_app.constants.network_constants import (
    USER_EMAIL_HEADER,
    USER_ID_HEADER,
    USER_NAME_HEADER,
)
from trivia_app.constants.quiz_constants import (
    CORRECT_ENCOURAGEMENT,
    DISPLAYED_ANSWERERS_LIMIT,
    INCORRECT_ENCOURAGEMENT,
    QUESTION_CREATED_MESSAGE,
)
from trivia_app.core.markdown_renderer import renderer
from trivia_app.core.models import Question, QuestionFeedItem, QuestionStats, UserAnswer
from trivia_app.core.question_validator import (
    QuestionValidationError,
    validate_choice,
    validate_question,
)
from trivia_app.core.services.stats_aggregator import difficulty_rating, format_time_ago
from trivia_app.core.store.base import StoreUnavailableError
from trivia_app.core.trivia_manager import TriviaManager

logger = logging.getLogger(__name__)


class QuestionPayload(BaseModel):
    """Payload schema for question creation."""

    question_text: Any = None
    choices: Any = None
    correct_answer: Any = None


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    selected_answer: Any = None


class Identity(BaseModel):
    """Verified caller identity forwarded by the upstream auth proxy."""

    user_id: str
    display_name: str
    email: str | None = None


def _header(request: Request, name: str) -> str | None:
    value = request.headers.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def require_identity(request: Request) -> Identity:
    user_id = _header(request, USER_ID_HEADER)
    display_name = _header(request, USER_NAME_HEADER)
    if not user_id or not display_name:
        raise HTTPException(status_code=401, detail="Authentication required")
    return Identity(
        user_id=user_id,
        display_name=display_name,
        email=_header(request, USER_EMAIL_HEADER),
    )


def _get_trivia_manager_dependency(trivia_manager: TriviaManager):
    def dependency() -> TriviaManager:
        return trivia_manager

    return dependency


def _epoch_ms(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def _question_payload(question: Question, include_correct_answer: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "question_text": question.question_text,
        "question_html": renderer.render_fragment(question.question_text),
        "choices": question.choices.as_dict(),
        "created_by": question.created_by,
        "created_at": question.created_at.isoformat(),
        "created_at_ms": _epoch_ms(question.created_at),
        "total_answers": question.total_answers,
        "correct_answers": question.correct_answers,
    }
    if include_correct_answer:
        payload["correct_answer"] = question.correct_answer
    return payload


def _user_answer_payload(answer: UserAnswer) -> dict[str, object]:
    return {
        "selected_answer": answer.selected_answer,
        "is_correct": answer.is_correct,
        "answered_at": answer.answered_at.isoformat(),
        "answered_at_ms": _epoch_ms(answer.answered_at),
    }


def _stats_payload(stats: QuestionStats, answerer_limit: int | None = None) -> dict[str, object]:
    answerers = stats.recent_answerers
    if answerer_limit is not None:
        answerers = answerers[:answerer_limit]
    return {
        "total_answers": stats.total_answers,
        "correct_answers": stats.correct_answers,
        "correct_percentage": stats.correct_percentage,
        "recent_answerers": [
            {
                "user_name": answerer.user_name,
                "is_correct": answerer.is_correct,
                "answered_at": answerer.answered_at.isoformat(),
                "answered_at_ms": _epoch_ms(answerer.answered_at),
            }
            for answerer in answerers
        ],
    }


def _feed_item_payload(item: QuestionFeedItem) -> dict[str, object]:
    payload = _question_payload(item.question, include_correct_answer=item.reveals_correct_answer)
    payload["is_my_question"] = item.is_my_question
    payload["is_answered"] = item.is_answered
    payload["user_answer"] = _user_answer_payload(item.user_answer) if item.user_answer else None
    payload["stats"] = _stats_payload(item.stats) if item.stats else None
    return payload


def create_api_app(trivia_manager: TriviaManager, settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided trivia manager."""
    settings = settings or Settings()
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    trivia_manager_dep = _get_trivia_manager_dependency(trivia_manager)

    origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject "*" with credentials
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error(
            "Store failure during %s %s (operation=%s key=%s user=%s)",
            request.method,
            request.url.path,
            exc.operation,
            exc.key,
            request.headers.get(USER_ID_HEADER),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    def health(manager: TriviaManager = Depends(trivia_manager_dep)) -> dict[str, object]:
        healthy = manager.is_store_healthy()
        return {"status": "healthy" if healthy else "degraded", "store": manager.backend_name}

    @app.post("/api/questions", status_code=201)
    def create_question(
        payload: QuestionPayload,
        identity: Identity = Depends(require_identity),
        manager: TriviaManager = Depends(trivia_manager_dep),
    ) -> dict[str, object]:
        try:
            draft = validate_question(payload.question_text, payload.choices, payload.correct_answer)
        except QuestionValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        question = manager.create_question(
            draft.question_text,
            draft.choices,
            draft.correct_answer,
            identity.user_id,
        )
        return {
            "success": True,
            "message": QUESTION_CREATED_MESSAGE,
            "question": _question_payload(question, include_correct_answer=False),
        }

    @app.get("/api/questions")
    def list_questions(
        identity: Identity = Depends(require_identity),
        manager: TriviaManager = Depends(trivia_manager_dep),
    ) -> dict[str, object]:
        feed = manager.get_feed(identity.user_id)
        return {
            "success": True,
            "questions": [_feed_item_payload(item) for item in feed],
            "count": len(feed),
        }

    @app.get("/api/questions/{question_id}")
    def get_question(
        question_id: str,
        identity: Identity = Depends(require_identity),
        manager: TriviaManager = Depends(trivia_manager_dep),
    ) -> dict[str, object]:
        question = manager.get_question(question_id)
        if question is None:
            raise HTTPException(status_code=404, detail="Question not found")
        reveal = question.created_by == identity.user_id or manager.has_answered(
            identity.user_id, question_id
        )
        return {"success": True, "question": _question_payload(question, include_correct_answer=reveal)}

    @app.post("/api/questions/{question_id}/answer")
    def submit_answer(
        question_id: str,
        payload: AnswerPayload,
        identity: Identity = Depends(require_identity),
        manager: TriviaManager = Depends(trivia_manager_dep),
    ) -> dict[str, object]:
        try:
            selected = validate_choice(payload.selected_answer)
        except QuestionValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        result = manager.submit_answer(question_id, identity.user_id, identity.display_name, selected)
        if not result.success:
            raise HTTPException(status_code=400, detail=result.message)

        return {
            "success": True,
            "is_correct": result.is_correct,
            "message": result.message,
            "feedback": {
                "selected_answer": selected,
                "is_correct": result.is_correct,
                "encouragement": CORRECT_ENCOURAGEMENT if result.is_correct else INCORRECT_ENCOURAGEMENT,
            },
            "stats": (
                _stats_payload(result.stats, answerer_limit=DISPLAYED_ANSWERERS_LIMIT)
                if result.stats
                else None
            ),
        }

    @app.get("/api/questions/{question_id}/stats")
    def get_question_stats(
        question_id: str,
        identity: Identity = Depends(require_identity),
        manager: TriviaManager = Depends(trivia_manager_dep),
    ) -> dict[str, object]:
        question = manager.get_question(question_id)
        if question is None:
            raise HTTPException(status_code=404, detail="Question not found")
        stats = manager.get_question_stats(question_id)
        if stats is None:
            # Expired between the two reads.
            raise HTTPException(status_code=404, detail="Question not found")

        now = manager.now()
        return {
            "success": True,
            "question_id": question_id,
            "question_text": question.question_text,
            "stats": {
                "total_answers": stats.total_answers,
                "correct_answers": stats.correct_answers,
                "incorrect_answers": stats.total_answers - stats.correct_answers,
                "correct_percentage": stats.correct_percentage,
                "accuracy_rating": difficulty_rating(stats.correct_percentage),
                "recent_answerers": [
                    {
                        "user_name": answerer.user_name,
                        "is_correct": answerer.is_correct,
                        "time_ago": format_time_ago(answerer.answered_at, now),
                    }
                    for answerer in stats.recent_answerers
                ],
            },
            "meta": {
                "created_by": question.created_by,
                "created_at": question.created_at.isoformat(),
                "time_ago": format_time_ago(question.created_at, now),
                "is_my_question": question.created_by == identity.user_id,
            },
        }

    return app


def run_api_server(trivia_manager: TriviaManager, settings: Settings) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(trivia_manager, settings)
    config = uvicorn.Config(
        app=app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    server.run()
