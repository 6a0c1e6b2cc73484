"""Flask App Factory"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import settings
from config.constants import INTERNAL_ERROR_MESSAGE
from core.database import Database
from webapp.services.marathon import MarathonService
from webapp.services.reconcile import ReconcileService
from webapp.services.registration import RegistrationService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def create_app(config=None):
    """
    Flask 애플리케이션을 생성하고 설정합니다.

    config 로 settings 값을 덮어쓸 수 있다 (테스트: DB_PATH, ACCESS_TOKEN_SECRET 등)
    """
    app = Flask(__name__)
    app.config.update(
        DB_PATH=settings.DB_PATH,
        ACCESS_TOKEN_SECRET=settings.ACCESS_TOKEN_SECRET,
        IS_PRODUCTION=settings.IS_PRODUCTION,
        CORS_ORIGINS=settings.CORS_ORIGINS,
        LOG_LEVEL=settings.LOG_LEVEL,
    )
    if config:
        app.config.update(config)

    configure_logging(app.config["LOG_LEVEL"])

    # 쿠키 인증을 쓰므로 credentials 허용
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    # 저장소 핸들은 앱마다 하나, 서비스에 주입
    db = Database(app.config["DB_PATH"])
    db.init_database()
    app.extensions["marathon_services"] = {
        "marathons": MarathonService(db),
        "registrations": RegistrationService(db),
        "reconcile": ReconcileService(db),
    }

    # Blueprint 등록
    from webapp.routes.api import api_bp
    from webapp.routes.auth_routes import auth_bp
    from webapp.routes.pages import pages_bp
    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("unhandled error")
        return jsonify({"success": False, "error": INTERNAL_ERROR_MESSAGE}), 500

    return app
