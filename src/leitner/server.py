import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from leitner.application.config import AppConfig, resolve_config
from leitner.application.factory import get_study_service
from leitner.application.service import StudyService
from leitner.consts import VERSION
from leitner.domain.errors import (
    CardNotFoundError,
    DuplicateCardError,
    InvalidCardError,
    InvalidDifficultyError,
    LeitnerError,
    MissingHintError,
)
from leitner.domain.models import Flashcard

logger = logging.getLogger("leitner.server")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardResponse(CamelModel):
    id: str
    front: str
    back: str
    hint: str | None = None
    tags: list[str]
    bucket: int | None = None


class PracticeResponse(CamelModel):
    cards: list[CardResponse]
    day: int


class UpdateRequest(CamelModel):
    card_front: str
    card_back: str
    # Coerced by AnswerDifficulty.parse so bools and floats map to 400
    difficulty: Any


class UpdateResponse(CamelModel):
    message: str
    previous_bucket: int
    new_bucket: int


class ProgressResponse(CamelModel):
    total_cards: int
    cards_in_buckets: dict[int, int]
    success_rate: float


class DayResponse(CamelModel):
    current_day: int


class BucketOverviewResponse(CamelModel):
    day: int
    min_bucket: int | None = None
    max_bucket: int | None = None
    counts: dict[int, int]


class NewCardRequest(CamelModel):
    # Validated by the service so missing fields map to 400, not 422
    front: str | None = None
    back: str | None = None
    hint: str | None = None
    tags: Any = None


class NewCardResponse(CamelModel):
    message: str
    card: CardResponse


def _card_response(card: Flashcard, bucket: int | None = None) -> CardResponse:
    return CardResponse(bucket=bucket, **card.to_dict())


def _http_error(e: LeitnerError) -> HTTPException:
    """Translate a domain error into the matching HTTP status."""
    if isinstance(e, (InvalidDifficultyError, InvalidCardError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (CardNotFoundError, MissingHintError)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DuplicateCardError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def get_service(request: Request) -> StudyService:
    return request.app.state.service


def create_app(service: StudyService | None = None, config: AppConfig | None = None) -> FastAPI:
    """
    Build the API around a study service.

    Each app owns its own service and state, so separate apps never interfere.
    """
    config = config or resolve_config()
    # No-op if the CLI already configured logging
    logging.basicConfig(level=config.log_level)
    service = service or get_study_service(config)
    start_time = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Leitner Server v{VERSION} starting up...")
        logger.info(f"Current Day: {app.state.service.store.get_current_day()}")
        yield
        # Shutdown
        logger.info("Leitner Server shutting down...")
        app.state.service.store.close()

    app = FastAPI(
        title="Leitner Server",
        description="Modified-Leitner spaced-repetition study server.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.config = config

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Simple health check to verify server is reachable.
        """
        return HealthResponse(
            status="ok", version=VERSION, uptime_seconds=time.time() - start_time
        )

    @app.get("/version")
    async def get_version():
        return {"version": VERSION}

    @app.get("/api/practice", response_model=PracticeResponse)
    async def get_practice_cards(svc: StudyService = Depends(get_service)):
        """Fetch the flashcards to practice for the current day."""
        try:
            cards, day = svc.due_cards()
        except Exception as e:
            logger.error(f"Error getting practice cards: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error fetching practice cards") from e
        return PracticeResponse(cards=[_card_response(c) for c in cards], day=day)

    @app.post("/api/update", response_model=UpdateResponse)
    async def update_card(req: UpdateRequest, svc: StudyService = Depends(get_service)):
        """Move a card to its next bucket based on the user's answer."""
        try:
            record = svc.submit_answer(req.card_front, req.card_back, req.difficulty)
        except LeitnerError as e:
            logger.warning(f"Update rejected: {e}")
            raise _http_error(e) from e
        except Exception as e:
            logger.error(f"Error updating card: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error updating card") from e

        return UpdateResponse(
            message="Card updated successfully",
            previous_bucket=record.previous_bucket,
            new_bucket=record.new_bucket,
        )

    @app.get("/api/hint")
    async def get_hint(
        cardFront: str | None = None,
        cardBack: str | None = None,
        svc: StudyService = Depends(get_service),
    ):
        """Fetch the hint of a specific flashcard."""
        if cardFront is None or cardBack is None:
            raise HTTPException(
                status_code=400, detail="Missing cardFront or cardBack query parameter"
            )
        try:
            return {"hint": svc.hint(cardFront, cardBack)}
        except LeitnerError as e:
            raise _http_error(e) from e

    @app.get("/api/progress", response_model=ProgressResponse)
    async def get_progress(svc: StudyService = Depends(get_service)):
        """Fetch the user's learning progress statistics."""
        try:
            stats = svc.progress()
        except Exception as e:
            logger.error(f"Error computing progress: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error computing progress") from e
        return ProgressResponse(
            total_cards=stats.total_cards,
            cards_in_buckets=stats.cards_in_buckets,
            success_rate=stats.success_rate,
        )

    @app.post("/api/day/next", response_model=DayResponse)
    async def next_day(svc: StudyService = Depends(get_service)):
        """Advance the simulation to the next day."""
        return DayResponse(current_day=svc.advance_day())

    @app.post("/api/cards", response_model=NewCardResponse, status_code=201)
    async def add_card(req: NewCardRequest, svc: StudyService = Depends(get_service)):
        """Add a new flashcard to bucket 0."""
        try:
            card = svc.add_card(req.front or "", req.back or "", hint=req.hint, tags=req.tags)
        except LeitnerError as e:
            raise _http_error(e) from e
        return NewCardResponse(message="Card added successfully", card=_card_response(card, 0))

    @app.get("/api/cards", response_model=list[CardResponse])
    async def list_cards(svc: StudyService = Depends(get_service)):
        """Fetch all flashcards with their current bucket."""
        return [_card_response(card, bucket) for card, bucket in svc.list_cards()]

    @app.get("/api/buckets", response_model=BucketOverviewResponse)
    async def get_buckets(svc: StudyService = Depends(get_service)):
        """Summarize which buckets hold cards."""
        return BucketOverviewResponse(**svc.bucket_overview())

    @app.get("/api/tags", response_model=list[str])
    async def list_tags(svc: StudyService = Depends(get_service)):
        """Fetch all unique tags across flashcards."""
        return svc.list_tags()

    return app


app = create_app()
