from flask import Blueprint

pages_bp = Blueprint('pages', __name__)


@pages_bp.route("/")
def page_index():
    # 상태 확인용
    return "Marathon server is running"
