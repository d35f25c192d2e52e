"""
Web application module for the Ultimate sideline scorekeeper.

This module contains the Flask web server that serves the HTML interface
and exposes the match controller as JSON API endpoints. A single lock
serialises request handlers and the background ticker so exactly one
mutator touches the match at a time.
"""
import atexit
import os
import threading
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request, send_from_directory

from ..services import (
    ActionRejected, EventNotFound, MatchSession, ServiceFactory, PRIMARY, SECONDARY,
)
from ..utils import configure_log_dir, get_logger, AppSettings

log = get_logger("ui.web_app")

SESSION_KEY = "MATCH_SESSION"
LOCK_KEY = "MATCH_LOCK"


def _players_from(value: Any) -> List[str]:
    """Accept a JSON list or newline-separated text."""
    if isinstance(value, list):
        return [str(p) for p in value]
    return str(value or "").splitlines()


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(
    session: Optional[MatchSession] = None,
    static_folder: str = ".",
    lock: Optional[threading.Lock] = None,
) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        session: Match session to serve; built from environment settings
            and launched when omitted
        static_folder: Directory to serve static files from
        lock: Lock shared with the background ticker

    Returns:
        Configured Flask application instance
    """
    if session is None:
        session = ServiceFactory(AppSettings.from_env()).create_match_session()
        session.launch()
    lock = lock or threading.Lock()

    app = Flask(__name__, static_folder=static_folder, static_url_path="")
    app.config[SESSION_KEY] = session
    app.config[LOCK_KEY] = lock

    def _state_payload() -> Dict[str, Any]:
        return {
            "state": session.controller.view(),
            "recovery_pending": session.recovery_pending,
            "notices": session.controller.drain_notices(),
        }

    def match_action(func: Callable[..., Any]) -> Callable[..., Any]:
        """Run a handler under the lock and map controller errors to HTTP codes."""

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            with lock:
                try:
                    result = func(*args, **kwargs) or {}
                    response = {"success": True}
                    response.update(result)
                    response.update(_state_payload())
                    return jsonify(response)
                except ActionRejected as e:
                    return jsonify({
                        "success": False,
                        "error": e.message,
                        "reason": e.reason,
                        "notices": session.controller.drain_notices(),
                    }), 400
                except EventNotFound as e:
                    return jsonify({
                        "success": False,
                        "error": e.message,
                        "notices": session.controller.drain_notices(),
                    }), 404
                except Exception as e:
                    log.exception(f"Unexpected error in {func.__name__}")
                    return jsonify({"success": False, "error": str(e)}), 500

        return wrapper

    @app.route("/")
    def index():
        """Serve the main HTML interface."""
        response = send_from_directory(static_folder, "index.html")
        response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response

    # ==================== State and recovery ==================== #

    @app.route("/api/state", methods=["GET"])
    @match_action
    def api_state():
        return {"teams_available": sorted(session.teams)}

    @app.route("/api/recovery", methods=["GET"])
    @match_action
    def api_recovery_status():
        snapshot = session.pending_snapshot
        if snapshot is None:
            return {"pending": False}
        return {
            "pending": True,
            "snapshot": {
                "match_id": f"{snapshot.team_a_name} vs {snapshot.team_b_name}",
                "timestamp": snapshot.timestamp,
                "event_count": len(snapshot.events),
            },
        }

    @app.route("/api/recovery", methods=["POST"])
    @match_action
    def api_recovery_resolve():
        accept = bool(_json_body().get("accept", False))
        if not session.resolve_recovery(accept):
            raise ActionRejected("no_recovery", "No previous session to restore.")
        return {"restored": accept}

    # ==================== Teams ==================== #

    @app.route("/api/teams", methods=["GET"])
    @match_action
    def api_teams():
        return {"teams": session.teams}

    @app.route("/api/teams/refresh", methods=["POST"])
    @match_action
    def api_teams_refresh():
        return {"teams": session.refresh_teams()}

    @app.route("/api/teams/select", methods=["POST"])
    @match_action
    def api_teams_select():
        data = _json_body()
        session.select_teams(data.get("team_a", ""), data.get("team_b", ""))
        return {}

    @app.route("/api/teams/players", methods=["POST"])
    @match_action
    def api_teams_players():
        data = _json_body()
        session.controller.set_team_players(data.get("side"), _players_from(data.get("players")))
        return {}

    @app.route("/api/teams/<side>/options", methods=["GET"])
    @match_action
    def api_player_options(side: str):
        return {"options": session.controller.player_options(side)}

    # ==================== Setup ==================== #

    @app.route("/api/setup", methods=["GET"])
    @match_action
    def api_setup_get():
        return {"config": session.controller.config.to_json()}

    @app.route("/api/setup", methods=["POST"])
    @match_action
    def api_setup_update():
        config = session.controller.configure(**_json_body())
        return {"config": config.to_json()}

    # ==================== Match actions ==================== #

    @app.route("/api/match/start", methods=["POST"])
    @match_action
    def api_match_start():
        return {"event_id": session.controller.start_match()}

    @app.route("/api/scores", methods=["POST"])
    @match_action
    def api_add_score():
        data = _json_body()
        event_id = session.controller.add_score(
            data.get("side"), data.get("scorer", ""), data.get("assistor", "")
        )
        return {"event_id": event_id}

    @app.route("/api/scores/<int:event_id>", methods=["PUT"])
    @match_action
    def api_edit_score(event_id: int):
        data = _json_body()
        event = session.controller.edit_score(
            event_id, scorer=data.get("scorer"), assistor=data.get("assistor")
        )
        return {"event": event.to_dict()}

    @app.route("/api/scores/<int:event_id>", methods=["DELETE"])
    @match_action
    def api_delete_score(event_id: int):
        return {"event": session.controller.delete_score(event_id).to_dict()}

    @app.route("/api/timeouts", methods=["POST"])
    @match_action
    def api_call_timeout():
        return {"event_id": session.controller.call_timeout(_json_body().get("side"))}

    @app.route("/api/timeouts/<int:event_id>", methods=["PUT"])
    @match_action
    def api_reassign_timeout(event_id: int):
        event = session.controller.reassign_timeout(event_id, _json_body().get("side"))
        return {"event": event.to_dict()}

    @app.route("/api/timeouts/<int:event_id>", methods=["DELETE"])
    @match_action
    def api_delete_timeout(event_id: int):
        return {"event": session.controller.delete_timeout(event_id).to_dict()}

    @app.route("/api/halftime", methods=["POST"])
    @match_action
    def api_declare_halftime():
        return {"event_id": session.controller.declare_halftime()}

    @app.route("/api/halftime/<int:event_id>", methods=["DELETE"])
    @match_action
    def api_delete_halftime(event_id: int):
        return {"event": session.controller.delete_halftime(event_id).to_dict()}

    @app.route("/api/stoppage", methods=["POST"])
    @match_action
    def api_toggle_stoppage():
        return {"stoppage_active": session.controller.toggle_stoppage()}

    @app.route("/api/clocks/<which>/toggle", methods=["POST"])
    @match_action
    def api_clock_toggle(which: str):
        return {"running": session.controller.toggle_clock(which)}

    @app.route("/api/clocks/<which>/reset", methods=["POST"])
    @match_action
    def api_clock_reset(which: str):
        remaining = session.controller.reset_clock(which, _json_body().get("seconds"))
        return {"remaining": remaining}

    @app.route("/api/submit", methods=["POST"])
    @match_action
    def api_submit():
        return {"submission": session.submit()}

    # ==================== Notices and storage ==================== #

    @app.route("/api/notices", methods=["GET"])
    def api_notices():
        with lock:
            return jsonify({"success": True, "notices": session.controller.drain_notices()})

    @app.route("/api/storage", methods=["GET"])
    @match_action
    def api_storage_info():
        return {"storage": session.persistence_service.get_storage_info()}

    @app.route("/api/storage", methods=["DELETE"])
    @match_action
    def api_storage_clear():
        session.persistence_service.clear_all_data()
        return {}

    return app


def start_ticker(
    session: MatchSession, lock: threading.Lock, interval: float
) -> Tuple[threading.Thread, threading.Event]:
    """
    Start the daemon thread that drives clocks and auto-save.

    Returns:
        The thread and the event that stops it
    """
    stop = threading.Event()

    def _run() -> None:
        while not stop.wait(interval):
            with lock:
                try:
                    session.tick()
                except Exception:
                    log.exception("Tick failed")

    thread = threading.Thread(target=_run, name="ultiscore-ticker", daemon=True)
    thread.start()
    return thread, stop


def run_web_app(settings: Optional[AppSettings] = None, static_folder: str = ".") -> None:
    """
    Run the web application.

    Args:
        settings: Deployment settings (read from the environment when omitted)
        static_folder: Directory containing static files (HTML, CSS, JS)
    """
    settings = settings or AppSettings.from_env()
    configure_log_dir(settings.log_dir)

    session = ServiceFactory(settings).create_match_session()
    session.launch()
    lock = threading.Lock()
    app = create_app(session, static_folder, lock)

    _, stop = start_ticker(session, lock, settings.tick_interval)

    def _shutdown() -> None:
        stop.set()
        with lock:
            session.shutdown()

    atexit.register(_shutdown)
    log.info(f"Serving on http://{settings.host}:{settings.port}")
    app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == "__main__":
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    run_web_app(static_folder=project_root)
