"""
Store handles for user routes.
"""

from __future__ import annotations

from fastapi import Request

from core import mongo

from .repository import UserRepository


def get_user_repository(request: Request) -> UserRepository:
    return UserRepository(mongo.users_collection(request.app.state.mongo_db))
