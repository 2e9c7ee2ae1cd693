from __future__ import annotations

from functools import wraps

from flask import flash, g, jsonify, redirect, request, session, url_for

from ..core.exceptions import (
    AuthenticationError,
    DomainError,
    OutOfSequenceError,
    StoreUnavailableError,
    UserNotFoundError,
    ValidationError,
)

GENERIC_ERROR_MESSAGE = "Erro interno do servidor."


def status_for(exc: Exception) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, UserNotFoundError):
        return 404
    if isinstance(exc, OutOfSequenceError):
        return 409
    if isinstance(exc, StoreUnavailableError):
        return 503
    if isinstance(exc, DomainError):
        return 400
    return 500


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def login_required(workflow):
    """Decorator factory: resolve the session token, expose the user as ``g.current_user``.

    Pages redirect to the login screen, ``/api/`` routes answer 401 JSON.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                user = workflow.current_user(session)
            except StoreUnavailableError as e:
                if request.path.startswith("/api/"):
                    return json_error(str(e), 503)
                flash(str(e), "danger")
                return redirect(url_for("login"))

            if user is None:
                if request.path.startswith("/api/"):
                    return json_error("Sessão expirada. Faça login novamente.", 401)
                flash("Por favor, faça login para continuar.", "warning")
                return redirect(url_for("login"))

            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator
