"""쿠키 토큰 인증"""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Dict

import jwt
from flask import current_app, g, jsonify, request

from config.constants import (
    STATUS_BY_REASON,
    TOKEN_ALGORITHM,
    TOKEN_COOKIE_NAME,
    TOKEN_EXPIRES_HOURS,
    UNAUTHENTICATED,
)

logger = logging.getLogger(__name__)


def issue_token(claims: Dict[str, Any], secret: str) -> str:
    """claims 에 만료(exp)를 붙여 서명한 토큰"""
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(hours=TOKEN_EXPIRES_HOURS)
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """서명/만료 검증 후 claims 반환. 실패하면 jwt.InvalidTokenError"""
    return jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])


def cookie_options() -> Dict[str, Any]:
    """배포 모드에 따른 쿠키 속성"""
    production = current_app.config["IS_PRODUCTION"]
    return {
        "httponly": True,
        "secure": production,
        "samesite": "None" if production else "Strict",
    }


def _unauthorized():
    return jsonify({"success": False, "error": "unauthorized access"}), STATUS_BY_REASON[UNAUTHENTICATED]


def verify_token(f):
    """
    보호 라우트 데코레이터

    쿠키의 토큰이 없거나 검증 실패면 401, 성공하면 g.user 에 claims
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = request.cookies.get(TOKEN_COOKIE_NAME)
        if not token:
            return _unauthorized()
        try:
            claims = decode_token(token, current_app.config["ACCESS_TOKEN_SECRET"])
        except jwt.InvalidTokenError as e:
            logger.info("rejected token: %s", e)
            return _unauthorized()

        # 이메일 없는 토큰으로는 소유자 확인을 할 수 없다
        if not claims.get("email"):
            return _unauthorized()

        g.user = claims
        return f(*args, **kwargs)
    return decorated_function
