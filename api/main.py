import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from auth.security import TokenService
from core import db, mongo
from songs import router as songs_router
from users import router as users_router
from users.repository import UserRepository

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool/client per process, handed to repositories via dependencies.
    app.state.token_service = TokenService.from_env()
    app.state.pg_pool = await db.create_pool()
    app.state.mongo_client = mongo.create_client()
    app.state.mongo_db = app.state.mongo_client[mongo.mongo_database()]
    try:
        await UserRepository(mongo.users_collection(app.state.mongo_db)).ensure_indexes()
    except PyMongoError:
        logger.warning("users_index_unavailable", exc_info=True)
    try:
        yield
    finally:
        await mongo.close_client(app.state.mongo_client)
        await db.close_pool(app.state.pg_pool)


app = FastAPI(lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies and path params are client errors, always 400 here.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Request is not valid.", "errors": jsonable_encoder(exc.errors())},
    )


app.include_router(songs_router.router, tags=["songs"])
app.include_router(users_router.router, tags=["users"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "music catalogue api"}
