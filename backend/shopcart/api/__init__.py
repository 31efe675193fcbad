"""HTTP surface: versioned blueprints plus the per-request authentication gate."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join_prefix(*segments: str) -> str:
    parts = [s.strip("/") for s in segments if s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` pair under ``base_prefix``.

    An empty relative prefix mounts the blueprint at ``base_prefix`` itself.
    """
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Install the authentication gate and register the API versions."""
    from shopcart.api import deps
    from shopcart.api.v1 import API_VERSION, DEV_REGISTRY, REGISTRY

    deps.init_app(app)

    version_prefix = _join_prefix(app.config.get("API_BASE_PREFIX", "/api"), API_VERSION)
    register_blueprint_group(app, base_prefix=version_prefix, entries=REGISTRY)

    # Development-only routes exist solely in unsafe mode
    if app.config.get("UNSAFE_DEV_AUTH") is True:
        app.logger.warning("Registering development authentication routes (UNSAFE_DEV_AUTH)")
        register_blueprint_group(app, base_prefix=version_prefix, entries=DEV_REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
