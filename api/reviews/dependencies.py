from __future__ import annotations

from fastapi import Request

from .repository import ReviewRepository


def get_review_repository(request: Request) -> ReviewRepository:
    return ReviewRepository(request.app.state.pg_pool)
