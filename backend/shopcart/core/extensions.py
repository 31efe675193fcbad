"""Process-wide Flask extension singletons and their initialization."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Deterministic constraint names (uq_shoppers_email, fk_cart_shares_cart_id_shop_carts, ...)
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(metadata=metadata, session_options={"autoflush": False})
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

#: Connected client when ``REDIS_URL`` is set; ``None`` selects in-memory stores
redis_client: redis.Redis | None = None

REDIS_SOCKET_TIMEOUT_SECONDS = 2.0


def connect_redis(url: str) -> redis.Redis:
    """Open a Redis client on ``url`` and check it answers.

    :raises RuntimeError: When the server cannot be reached.
    """
    client = redis.Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        health_check_interval=30,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind SQLAlchemy, Flask-JWT-Extended and Flask-Limiter, then connect Redis.

    Parameters
    ----------
    app: flask.Flask
        Application being configured. :mod:`shopcart.models` is imported here
        so the metadata is complete before ``create_all`` runs.

    Raises
    ------
    RuntimeError
        When ``REDIS_URL`` is configured but the server does not answer.
    """
    # Flask-JWT-Extended reads its own expiry key
    app.config.setdefault(
        "JWT_ACCESS_TOKEN_EXPIRES", int(app.config.get("ACCESS_TOKEN_TTL_SECONDS", 900))
    )

    db.init_app(app)
    from shopcart import models as _models  # noqa: F401

    jwt.init_app(app)
    limiter.init_app(app)

    global redis_client
    redis_url = app.config.get("REDIS_URL")
    redis_client = connect_redis(redis_url) if redis_url else None
    if redis_client is None:
        app.extensions.pop("redis_client", None)
    else:
        app.extensions["redis_client"] = redis_client
        log.info("redis.connected")

