# utils/query_utils.py
import json
from typing import Any, Dict, List, Optional, Tuple

LIKE_ESCAPE = "\\"

# sqlite INTEGER 범위 (부호 있는 64비트)
MAX_ID = 2 ** 63 - 1


def escape_like(text: str) -> str:
    """LIKE 패턴에서 %, _ 를 문자 그대로 찾도록 이스케이프"""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
    )


def sort_direction(sort: Optional[str]) -> str:
    """sort=desc 면 DESC, 나머지(없음/asc/기타)는 ASC"""
    return "DESC" if (sort or "").strip().lower() == "desc" else "ASC"


def coerce_id(value: Any) -> Optional[int]:
    """
    문서 ID로 쓸 수 있는 정수로 변환. 불가능하면 None

    "12", 12 는 허용, True/"abc"/12.5/범위 밖 정수는 거부
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, int) and id_in_range(value):
        return value
    return None


def id_in_range(value: int) -> bool:
    """sqlite 에 바인딩할 수 있는 ID 인지 (범위 밖이면 OverflowError)"""
    return 0 <= value <= MAX_ID


def json_set_clause(fields: Dict[str, Any], column: str = "data") -> Tuple[str, List[Any]]:
    """
    JSON 컬럼의 일부 키만 덮어쓰는 json_set(...) 식과 파라미터

    fields 가 비어 있으면 컬럼 그대로
    """
    if not fields:
        return column, []
    parts: List[str] = []
    params: List[Any] = []
    for key, value in fields.items():
        parts.append("?, json(?)")
        params.append(f'$."{key}"')
        params.append(json.dumps(value))
    return f"json_set({column}, {', '.join(parts)})", params
