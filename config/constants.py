# 홈 화면에 노출할 마라톤 수
HOME_MARATHON_LIMIT = 6

# ============= 인증 =============
TOKEN_COOKIE_NAME = "token"
TOKEN_ALGORITHM = "HS256"
TOKEN_EXPIRES_HOURS = 10

# ============= 오류 분류 =============
NOT_FOUND = "not_found"
UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"
VALIDATION = "validation"
DELETE_FAILED = "delete_failed"
INTERNAL = "internal"

STATUS_BY_REASON = {
    NOT_FOUND: 404,
    UNAUTHENTICATED: 401,
    FORBIDDEN: 403,
    VALIDATION: 400,
    DELETE_FAILED: 409,
    INTERNAL: 500,
}

# 클라이언트에 노출하는 일반 오류 메시지 (상세 내용은 로그로만)
INTERNAL_ERROR_MESSAGE = "Internal server error"

# 클라이언트가 직접 쓸 수 없는 필드
PROTECTED_MARATHON_FIELDS = ("_id", "totalRegistrationCount")
PROTECTED_REGISTRATION_FIELDS = ("_id",)
