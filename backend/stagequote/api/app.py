"""FastAPI application — create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from stagequote.exceptions import InvalidInputError, StageQuoteError
from stagequote.models.enums import AccessDifficulty, PropertyType, StylingType
from stagequote.models.property import QuoteRequest, RoomOverride  # noqa: TCH001 (FastAPI resolves at runtime)

if TYPE_CHECKING:
    from stagequote.engine import QuoteEngine
    from stagequote.models.quote import QuoteEstimate

logger = logging.getLogger(__name__)


def _estimate_response(estimate: QuoteEstimate) -> dict[str, Any]:
    return {
        "estimate": estimate.model_dump(mode="json"),
        "summary_dict": estimate.to_summary_dict(),
        "submission": estimate.to_submission_dict(),
    }


def create_app(*, engine: QuoteEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    engine
        Optional pre-built quote engine for dependency injection (e.g.
        tests). If not provided, one is created from environment
        variables on first request.
    """
    app = FastAPI(title="StageQuote", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject mocks
    app.state.engine = engine

    def _get_engine() -> QuoteEngine:
        eng: QuoteEngine | None = app.state.engine
        if eng is not None:
            return eng
        from stagequote.api.deps import create_engine

        eng = create_engine()
        app.state.engine = eng
        return eng

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": "0.1.0"}

    # ------------------------------------------------------------------
    # GET /api/settings
    # ------------------------------------------------------------------

    @app.get("/api/settings")
    def settings() -> dict[str, Any]:
        repository = _get_engine().repository
        return {
            "property_types": repository.property_types,
            "styling_options": repository.styling_options,
            "access_difficulties": [d.value for d in AccessDifficulty],
            "room_types": {
                name: s.model_dump() for name, s in repository.room_types.items()
            },
            "rate_table": repository.get_rate_table().model_dump(mode="json"),
            "rate_table_source": repository.rate_table_source,
        }

    # ------------------------------------------------------------------
    # POST /api/quote
    # ------------------------------------------------------------------

    @app.post("/api/quote")
    def quote(request: QuoteRequest) -> dict[str, Any]:
        try:
            estimate = _get_engine().quote_request(request)
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StageQuoteError as exc:
            logger.exception("Quote engine error")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return _estimate_response(estimate)

    # ------------------------------------------------------------------
    # GET /api/sample-quote
    # ------------------------------------------------------------------

    @app.get("/api/sample-quote")
    def sample_quote() -> dict[str, Any]:
        sample_request = QuoteRequest(
            property_type=PropertyType.HOUSE,
            listing_price=1_200_000,
            distance_from_warehouse=18.5,
            styling=StylingType.FULL,
            property_address="12 Sample Street",
            rooms={
                "Living Room": RoomOverride(count=1),
                "Dining Room": RoomOverride(count=1),
                "Kitchen": RoomOverride(count=1),
                "Standard Bedroom": RoomOverride(count=2),
                "Standard Bathroom": RoomOverride(count=2),
                "Outdoor (small)": RoomOverride(count=1, percentage=50),
            },
        )
        estimate = _get_engine().quote_request(sample_request)
        return _estimate_response(estimate)

    return app
