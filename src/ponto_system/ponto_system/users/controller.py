from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.validators import require_int
from ..common.web import GENERIC_ERROR_MESSAGE, json_error, status_for
from ..container import Container
from ..core.exceptions import DomainError, StoreUnavailableError, UserNotFoundError, ValidationError
from .service import NeedsSetup

logger = logging.getLogger(__name__)

SETUP_USER_KEY = "setup_user_id"
SETUP_NAME_KEY = "setup_user_name"


def _optional_int(value):
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def register(app: Flask, container: Container) -> None:
    workflow = container.session_workflow
    directory = container.directory_service

    @app.route("/", methods=["GET"], endpoint="login")
    def login():
        try:
            if workflow.current_user(session):
                return redirect(url_for("ponto"))
            data = directory.initial_data()
        except StoreUnavailableError as e:
            return render_template("login.html", departments=[], users=[], error=str(e)), 503

        dept_id = _optional_int(request.args.get("departamento"))
        users = [u for u in data.users if u.dept_id == dept_id] if dept_id is not None else []
        return render_template(
            "login.html",
            departments=data.departments,
            users=users,
            selected_dept=dept_id,
            selected_user=_optional_int(request.args.get("utilizador")),
            error=None,
        )

    @app.route("/login", methods=["POST"], endpoint="login_submit")
    def login_submit():
        dept_id = _optional_int(request.form.get("dept_id"))
        raw_user = request.form.get("user_id")
        try:
            if not raw_user:
                raise ValidationError("Por favor, selecione um utilizador.")
            user_id = require_int(raw_user, "Utilizador")

            outcome = workflow.begin_login(user_id, request.form.get("password", ""))
            if isinstance(outcome, NeedsSetup):
                session[SETUP_USER_KEY] = outcome.user_id
                session[SETUP_NAME_KEY] = outcome.name
                return redirect(url_for("setup_password"))

            session.pop(SETUP_USER_KEY, None)
            session.pop(SETUP_NAME_KEY, None)
            workflow.start_session(session, outcome)
            flash(f"Bem-vindo(a), {outcome.name}!", "success")
            return redirect(url_for("ponto"))
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("login failed")
            flash(GENERIC_ERROR_MESSAGE, "danger")

        # password field is never echoed back
        return redirect(url_for("login", departamento=dept_id, utilizador=_optional_int(raw_user)))

    @app.route("/setup-password", methods=["GET", "POST"], endpoint="setup_password")
    def setup_password():
        user_id = session.get(SETUP_USER_KEY)
        if user_id is None:
            flash("Selecione o seu utilizador para continuar.", "warning")
            return redirect(url_for("login"))

        status = 200
        if request.method == "POST":
            try:
                outcome = workflow.complete_setup(
                    int(user_id),
                    request.form.get("new_password", ""),
                    request.form.get("confirm_password", ""),
                )
                session.pop(SETUP_USER_KEY, None)
                session.pop(SETUP_NAME_KEY, None)
                workflow.start_session(session, outcome)
                flash("Senha criada com sucesso!", "success")
                return redirect(url_for("ponto"))
            except UserNotFoundError as e:
                session.pop(SETUP_USER_KEY, None)
                session.pop(SETUP_NAME_KEY, None)
                flash(str(e), "danger")
                return redirect(url_for("login"))
            except DomainError as e:
                flash(str(e), "danger")
                status = status_for(e)
            except Exception:
                logger.exception("password setup failed")
                flash("Erro ao configurar a senha.", "danger")
                status = 500

        return (
            render_template(
                "setup_password.html",
                name=session.get(SETUP_NAME_KEY),
                min_length=workflow.policy.password_min_length,
            ),
            status,
        )

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        workflow.end_session(session)
        session.pop(SETUP_USER_KEY, None)
        session.pop(SETUP_NAME_KEY, None)
        flash("Sessão terminada.", "info")
        return redirect(url_for("login"))

    @app.route("/api/departamentos/<int:dept_id>/usuarios", methods=["GET"], endpoint="api_department_users")
    def api_department_users(dept_id: int):
        try:
            users = directory.users_in_department(dept_id)
        except StoreUnavailableError as e:
            return json_error(str(e), 503)
        return jsonify(
            {
                "success": True,
                "usuarios": [{"id": u.user_id, "nome": u.name, "departamentoId": u.dept_id} for u in users],
            }
        )
