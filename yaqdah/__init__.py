# Flask 앱 초기화 및 설정

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from yaqdah.models.alertness import ClassifierResult

logger = logging.getLogger(__name__)

__version__ = "0.1.0"


def build_session(config):
    """Wire the state machine to the real audio, Gemini and SMS sinks."""
    from yaqdah.services.audio import AudioService
    from yaqdah.services.dispatcher import InterventionDispatcher
    from yaqdah.services.emergency import EmergencyNotifier
    from yaqdah.services.llm import MessageGenerator
    from yaqdah.services.session import MonitoringSession
    from yaqdah.services.state_machine import AlertnessStateMachine, DecisionConfig

    machine = AlertnessStateMachine(DecisionConfig.from_config(config))
    dispatcher = InterventionDispatcher(
        audio=AudioService.from_config(config),
        notifier=EmergencyNotifier.from_config(config),
        message_source=MessageGenerator.from_config(config),
        language=config.get("LANGUAGE", "ar"),
    )
    return MonitoringSession(machine, dispatcher, camera_count=config.get("CAMERA_COUNT", 1))


def create_app(session=None, config=None):
    if config is None:
        from yaqdah.config.settings import load_config
        config = load_config()
    if session is None:
        session = build_session(config)

    app = Flask(__name__)
    app.config.update(config)
    app.extensions["yaqdah_session"] = session
    CORS(app)

    @app.route("/status")
    def get_status():
        return jsonify({"status": "success", "session": session.snapshot()})

    @app.route("/heartbeat")
    def heartbeat():
        return jsonify({"status": "ok"})

    @app.route("/classification", methods=["POST"])
    def classification():
        payload = request.get_json(silent=True)
        if isinstance(payload, dict) and "face" in payload:
            payload = payload["face"]
        result = ClassifierResult.from_mapping(payload)
        accepted = session.submit_result(result)
        return jsonify({
            "status": "success",
            "accepted": accepted,
            "state": session.context.state.label,
        })

    @app.route("/pause", methods=["POST"])
    def pause():
        return jsonify({"status": "success", "session": _snapshot(session.pause())})

    @app.route("/resume", methods=["POST"])
    def resume():
        return jsonify({"status": "success", "session": _snapshot(session.resume())})

    @app.route("/sos", methods=["POST"])
    def sos():
        return jsonify({"status": "success", "session": _snapshot(session.manual_emergency())})

    @app.route("/stop_alarm", methods=["POST"])
    def stop_alarm():
        return jsonify({"status": "success", "session": _snapshot(session.stop_alarm())})

    @app.route("/switch_camera", methods=["POST"])
    def switch_camera():
        context = session.switch_camera()
        if context is None:
            return jsonify({"status": "error", "message": "No other cameras found!"}), 409
        return jsonify({"status": "success", "session": _snapshot(context)})

    @app.route("/listening", methods=["POST"])
    def listening():
        payload = request.get_json(silent=True) or {}
        context = session.set_listening(bool(payload.get("listening", False)))
        return jsonify({"status": "success", "session": _snapshot(context)})

    @app.errorhandler(Exception)
    def handle_error(e):
        code = getattr(e, "code", 500)
        if not isinstance(code, int):
            code = 500
        if code >= 500:
            logger.exception(f"Request failed: {e}")
        return jsonify({"status": "error", "message": str(e)}), code

    return app


def _snapshot(context):
    return context.to_dict()
