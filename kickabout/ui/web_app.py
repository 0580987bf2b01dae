"""
Web application module for Kickabout Teams.

This module contains the Flask web server exposing the roster, attendance,
team balancing and coin toss features as JSON API endpoints.
"""
import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, session

from ..services import (
    GuidanceError, InvalidKeyError, KickaboutError, MatchdayService, MissingIdentityError,
    PlayerNotFoundError, RosterValidationError, ServiceFactory, StoreError
)
from ..services.identity import IdentityProvider, normalize_owner_id
from ..utils import (
    APP_TITLE, AVATARS, COIN_TOSS_REVEAL_MS, DEFAULT_AVATAR, DEFAULT_RATING, POSITIONS,
    RATING_MAX, RATING_MIN, RATING_STEP, TEAM_LABELS, AppConfig, configure_logging
)
from ..utils.constants import MAX_ACTIVE_SESSIONS

logger = logging.getLogger(__name__)

OWNER_SESSION_KEY = "owner_id"
ROSTER_KEY_HEADER = "X-Roster-Key"

ERROR_STATUS = {
    RosterValidationError: 400,
    MissingIdentityError: 401,
    InvalidKeyError: 403,
    PlayerNotFoundError: 404,
    StoreError: 502,
}


class FlaskSessionIdentityProvider:
    """Reads the signed-in owner id from the Flask session cookie."""

    def current_owner_id(self) -> Optional[str]:
        return normalize_owner_id(session.get(OWNER_SESSION_KEY))


class WebAppState:
    """
    State holder for the web application.

    Keeps one MatchdayService per signed-in owner; each holds that owner's
    roster, attendance and current team split in memory. At most
    ``max_services`` are kept; the least recently used one is dropped and
    reloads from the store on its owner's next request.
    """

    def __init__(self, factory: ServiceFactory, identity: Optional[IdentityProvider] = None,
                 max_services: int = MAX_ACTIVE_SESSIONS):
        self.factory = factory
        self.identity: IdentityProvider = identity or FlaskSessionIdentityProvider()
        self.max_services = max(1, max_services)
        self._services: "OrderedDict[str, MatchdayService]" = OrderedDict()
        self._lock = threading.Lock()

    def service_for(self, owner_id: str) -> MatchdayService:
        with self._lock:
            service = self._services.get(owner_id)
            if service is None:
                service = self.factory.create_matchday_service(owner_id)
                self._services[owner_id] = service
                while len(self._services) > self.max_services:
                    evicted, _ = self._services.popitem(last=False)
                    logger.info("Dropped in-memory session for owner %s", evicted)
            else:
                self._services.move_to_end(owner_id)
            return service

    def active_owner_ids(self) -> List[str]:
        """Owner ids with an in-memory session, least recently used first."""
        with self._lock:
            return list(self._services)

    def current_service(self) -> MatchdayService:
        """
        Service for the signed-in owner.

        Raises:
            MissingIdentityError: If nobody is signed in
        """
        owner_id = self.identity.current_owner_id()
        if owner_id is None:
            raise MissingIdentityError("Sign in to manage the squad")
        return self.service_for(owner_id)

    def forget(self, owner_id: Optional[str]) -> None:
        if owner_id is not None:
            with self._lock:
                self._services.pop(owner_id, None)


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _provided_key(data: Dict[str, Any]) -> Optional[str]:
    """Roster key from the request body, falling back to the header."""
    key = data.get("key")
    if key is None:
        key = request.headers.get(ROSTER_KEY_HEADER)
    return key


def _parse_flag(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no"):
        return False
    raise RosterValidationError(f"'{field_name}' must be true or false")


def create_app(config: Optional[AppConfig] = None, factory: Optional[ServiceFactory] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        config: Application configuration (read from the environment when omitted)
        factory: Service factory (built from ``config`` when omitted)

    Returns:
        Configured Flask application instance
    """
    if config is None:
        config = factory.config if factory is not None else AppConfig.from_env()
    factory = factory or ServiceFactory(config)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.json.ensure_ascii = False
    state = WebAppState(factory)
    app.extensions["kickabout_state"] = state

    # ==================== Error handling ==================== #

    @app.errorhandler(GuidanceError)
    def handle_guidance(e: GuidanceError):
        return jsonify({"success": False, "guidance": str(e)})

    @app.errorhandler(KickaboutError)
    def handle_app_error(e: KickaboutError):
        status = next((code for cls, code in ERROR_STATUS.items() if isinstance(e, cls)), 500)
        if status >= 500:
            logger.warning("Request %s %s failed: %s", request.method, request.path, e)
        return jsonify({"success": False, "error": str(e)}), status

    # ==================== General Endpoints ==================== #

    @app.route("/")
    def index():
        return jsonify({"success": True, "app": APP_TITLE})

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"success": True, "status": "ok"})

    @app.route("/api/options", methods=["GET"])
    def get_options():
        """Choices the roster form offers."""
        return jsonify({
            "success": True,
            "positions": POSITIONS,
            "avatars": AVATARS,
            "default_avatar": DEFAULT_AVATAR,
            "rating": {
                "min": RATING_MIN,
                "max": RATING_MAX,
                "step": RATING_STEP,
                "default": DEFAULT_RATING,
            },
            "team_labels": TEAM_LABELS,
        })

    # ==================== Session Endpoints ==================== #

    @app.route("/api/session", methods=["GET"])
    def get_session():
        owner_id = state.identity.current_owner_id()
        return jsonify({"success": True, "signed_in": owner_id is not None, "owner_id": owner_id})

    @app.route("/api/session", methods=["POST"])
    def sign_in():
        """Start a session for an owner id supplied by the identity provider."""
        owner_id = normalize_owner_id(_json_body().get("owner_id"))
        if owner_id is None:
            raise MissingIdentityError("An owner id is required to sign in")
        session[OWNER_SESSION_KEY] = owner_id
        service = state.service_for(owner_id)
        service.load()
        logger.info("Owner %s signed in", owner_id)
        return jsonify({"success": True, "owner_id": owner_id})

    @app.route("/api/session", methods=["DELETE"])
    def sign_out():
        owner_id = state.identity.current_owner_id()
        session.pop(OWNER_SESSION_KEY, None)
        state.forget(owner_id)
        return jsonify({"success": True, "message": "Signed out. Come back soon!"})

    # ==================== Player Management Endpoints ==================== #

    @app.route("/api/players", methods=["GET"])
    def get_players():
        view = state.current_service().roster_view()
        return jsonify({"success": True, **view})

    @app.route("/api/players", methods=["POST"])
    def create_player():
        """Add a player; the roster key is needed once the roster is not empty."""
        data = _json_body()
        player = state.current_service().add_player(data, _provided_key(data))
        return jsonify({
            "success": True,
            "message": f"{player.name} has joined the squad!",
            "player": player.to_dict(),
        }), 201

    @app.route("/api/players/<player_id>", methods=["PUT"])
    def update_player(player_id: str):
        data = _json_body()
        player = state.current_service().update_player(player_id, data, _provided_key(data))
        return jsonify({
            "success": True,
            "message": f"{player.name} has been updated successfully.",
            "player": player.to_dict(),
        })

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        data = _json_body()
        state.current_service().delete_player(player_id, _provided_key(data))
        return jsonify({"success": True, "message": "Player has been removed from the squad."})

    # ==================== Attendance Endpoints ==================== #

    @app.route("/api/attendance", methods=["GET"])
    def get_attendance():
        view = state.current_service().attendance_view()
        return jsonify({"success": True, **view})

    @app.route("/api/attendance/all", methods=["POST"])
    def update_all_attendance():
        """Select everyone, clear everyone, or toggle like the "Select All" button."""
        data = _json_body()
        service = state.current_service()
        if "attending" in data:
            if _parse_flag(data["attending"], "attending"):
                service.select_all()
            else:
                service.clear_all()
        else:
            service.toggle_all()
        return jsonify({"success": True, **service.attendance_view()})

    @app.route("/api/attendance/<player_id>", methods=["POST"])
    def update_attendance(player_id: str):
        """Set a player's attendance for today, or toggle it when no flag is given."""
        data = _json_body()
        service = state.current_service()
        if "attending" in data:
            service.set_attendance(player_id, _parse_flag(data["attending"], "attending"))
        else:
            service.toggle_attendance(player_id)
        return jsonify({
            "success": True,
            "attending": player_id in service.session.attendee_ids,
            **service.attendance_view(),
        })

    # ==================== Teams Endpoints ==================== #

    @app.route("/api/teams", methods=["GET"])
    def get_teams():
        view = state.current_service().teams_view()
        return jsonify({"success": True, **view})

    @app.route("/api/teams", methods=["POST"])
    def generate_teams():
        service = state.current_service()
        split = service.generate_teams()
        return jsonify({
            "success": True,
            "message": "Teams generated! Check out your balanced teams.",
            "teams": split.to_dict(),
        })

    @app.route("/api/coin-toss", methods=["POST"])
    def coin_toss():
        """Toss for first choice of ball possession or field side."""
        winner = state.current_service().flip_coin()
        return jsonify({
            "success": True,
            "winner": winner,
            "winner_label": TEAM_LABELS[winner],
            "reveal_delay_ms": COIN_TOSS_REVEAL_MS,
        })

    return app


def run_web_app(config: Optional[AppConfig] = None) -> None:
    """
    Run the web application.

    Args:
        config: Application configuration (read from the environment when omitted)
    """
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    app = create_app(config)
    logger.info("Starting %s on %s:%d", APP_TITLE, config.host, config.port)
    app.run(host=config.host, port=config.port, debug=False)


if __name__ == "__main__":
    run_web_app()
