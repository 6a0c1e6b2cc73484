"""토큰 발급/해제 라우트"""

from datetime import timedelta

from flask import Blueprint, current_app, jsonify, request

from config.constants import TOKEN_COOKIE_NAME, TOKEN_EXPIRES_HOURS
from webapp.auth import cookie_options, issue_token

auth_bp = Blueprint('auth', __name__)


@auth_bp.route("/jwt", methods=["POST"])
def api_issue_token():
    """
    POST /jwt  {"email": "..."}
    서명한 토큰을 httpOnly 쿠키로 내려준다 (10시간)
    """
    user = request.get_json(silent=True)
    if not isinstance(user, dict) or not isinstance(user.get("email"), str) or not user["email"].strip():
        return jsonify({"success": False, "error": "email is required"}), 400

    token = issue_token(user, current_app.config["ACCESS_TOKEN_SECRET"])
    resp = jsonify({"success": True})
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        max_age=int(timedelta(hours=TOKEN_EXPIRES_HOURS).total_seconds()),
        **cookie_options()
    )
    return resp


@auth_bp.route("/logout", methods=["POST"])
def api_logout():
    resp = jsonify({"success": True})
    resp.set_cookie(TOKEN_COOKIE_NAME, "", max_age=0, **cookie_options())
    return resp
