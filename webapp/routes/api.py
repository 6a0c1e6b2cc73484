from flask import Blueprint, current_app, g, jsonify, request

from config.constants import FORBIDDEN, STATUS_BY_REASON
from webapp.auth import verify_token

api_bp = Blueprint('api', __name__)


def _service(name):
    return current_app.extensions["marathon_services"][name]


def _respond(result, status: int = 200):
    """서비스 결과 dict -> 응답. 실패는 reason 으로 상태 코드 결정"""
    if result.get('success'):
        return jsonify(result), status
    code = STATUS_BY_REASON.get(result.get('reason'), 400)
    return jsonify({"success": False, "error": result.get('error')}), code


# -------------------- Marathons --------------------
@api_bp.route("/marathons", methods=["GET"])
def api_list_marathons():
    """
    GET /marathons?email=&sort=asc|desc
    작성자 필터 + createdAt 정렬
    """
    marathons = _service("marathons").list_marathons(
        email=request.args.get("email"),
        sort=request.args.get("sort"),
    )
    return jsonify(marathons)


@api_bp.route("/marathonsInHome", methods=["GET"])
def api_home_marathons():
    return jsonify(_service("marathons").list_home_marathons())


@api_bp.route("/marathons/<int:mid>", methods=["GET"])
def api_get_marathon(mid: int):
    m = _service("marathons").get_marathon(mid)
    if not m:
        return jsonify({"success": False, "error": "Marathon not found"}), 404
    return jsonify(m)


@api_bp.route("/marathons", methods=["POST"])
def api_create_marathon():
    data = request.get_json(silent=True)
    return _respond(_service("marathons").create_marathon(data), 201)


@api_bp.route("/marathons/<int:mid>", methods=["PUT"])
def api_update_marathon(mid: int):
    data = request.get_json(silent=True)
    return _respond(_service("marathons").update_marathon(mid, data))


@api_bp.route("/marathons/<int:mid>", methods=["DELETE"])
def api_delete_marathon(mid: int):
    return _respond(_service("marathons").delete_marathon(mid))


# -------------------- Registrations --------------------
@api_bp.route("/registerMarathon", methods=["GET"])
@verify_token
def api_list_registrations():
    """
    GET /registerMarathon?email=&search=
    본인 이메일로만 조회 가능. email 이 없으면 토큰 이메일 기준
    """
    user_email = g.user.get("email")
    email = request.args.get("email")
    if email is not None and email != user_email:
        return jsonify({"success": False, "error": "forbidden access"}), STATUS_BY_REASON[FORBIDDEN]

    registrations = _service("registrations").list_registrations(
        email=user_email,
        search=request.args.get("search"),
    )
    return jsonify(registrations)


@api_bp.route("/registerMarathon", methods=["POST"])
def api_create_registration():
    data = request.get_json(silent=True)
    return _respond(_service("registrations").create_registration(data), 201)


@api_bp.route("/registerMarathon/<int:rid>", methods=["PUT"])
def api_update_registration(rid: int):
    data = request.get_json(silent=True)
    return _respond(_service("registrations").update_registration(rid, data))


@api_bp.route("/registerMarathon/<int:rid>", methods=["DELETE"])
def api_delete_registration(rid: int):
    return _respond(_service("registrations").delete_registration(rid))
