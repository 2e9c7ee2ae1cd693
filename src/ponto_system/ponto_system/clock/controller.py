from __future__ import annotations

import logging

from flask import Flask, flash, g, jsonify, redirect, render_template, request, url_for

from ..common.web import GENERIC_ERROR_MESSAGE, json_error, login_required, status_for
from ..container import Container
from ..core.exceptions import DomainError, OutOfSequenceError, StoreUnavailableError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    clock = container.clock_service
    auth = login_required(container.session_workflow)

    def _render_ponto(*, report: str = "", status: int = 200):
        user = g.current_user
        try:
            current = clock.status(user.user_id)
            events = [clock.to_ui(e) for e in current.events]
            next_type = current.next_type.value
        except StoreUnavailableError as e:
            flash(str(e), "danger")
            events, next_type, status = [], None, 503

        return (
            render_template(
                "ponto.html",
                user=user,
                events=events,
                next_type=next_type,
                report=report,
                policy=clock.policy,
            ),
            status,
        )

    @app.route("/ponto", methods=["GET"], endpoint="ponto")
    @auth
    def ponto():
        return _render_ponto()

    @app.route("/ponto", methods=["POST"], endpoint="ponto_submit")
    @auth
    def ponto_submit():
        report = request.form.get("relatorio", "")
        try:
            event = clock.record_event(g.current_user.user_id, request.form.get("tipo"), report)
            flash(f"Ponto de {event.event_type.value} registado com sucesso!", "success")
            return redirect(url_for("ponto"))
        except OutOfSequenceError as e:
            flash(str(e), "warning")
            return _render_ponto(report=report, status=409)
        except DomainError as e:
            flash(str(e), "danger")
            return _render_ponto(report=report, status=status_for(e))
        except Exception:
            logger.exception("clock event failed")
            flash("Falha ao registar ponto.", "danger")
            return _render_ponto(report=report, status=500)

    @app.route("/api/pontos/hoje", methods=["GET"], endpoint="api_today")
    @auth
    def api_today():
        user = g.current_user
        try:
            current = clock.status(user.user_id)
        except StoreUnavailableError as e:
            return json_error(str(e), 503)
        return jsonify(
            {
                "success": True,
                "usuario": {"id": user.user_id, "nome": user.name},
                "pontos": [clock.to_ui(e) for e in current.events],
                "proximo": current.next_type.value,
            }
        )

    @app.route("/api/pontos", methods=["POST"], endpoint="api_record")
    @auth
    def api_record():
        data = request.get_json(silent=True) or {}
        try:
            event = clock.record_event(g.current_user.user_id, data.get("tipo"), data.get("relatorio"))
        except DomainError as e:
            return json_error(str(e), status_for(e))
        except Exception:
            logger.exception("clock event failed")
            return json_error(GENERIC_ERROR_MESSAGE, 500)

        return jsonify({"success": True, "ponto": clock.to_ui(event)}), 201
