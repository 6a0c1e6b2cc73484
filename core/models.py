"""행(row) <-> 문서(JSON) 변환"""

import json
import sqlite3
from typing import Any, Dict, Tuple

# 문서 키 -> 컬럼 이름. 여기 없는 키는 data(JSON) 컬럼에 그대로 보관
MARATHON_COLUMNS = {
    "creatorEmail": "creator_email",
    "createdAt": "created_at",
}
REGISTRATION_COLUMNS = {
    "email": "email",
    "marathonTitle": "marathon_title",
}

_SCALAR_TYPES = (str, int, float, type(None))


class DocumentError(ValueError):
    """문서 형식이 저장할 수 없는 모양일 때"""


def split_document(doc: Dict[str, Any], columns: Dict[str, str]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    문서를 (컬럼 값, 나머지 필드) 로 나눈다.

    컬럼으로 승격되는 필드는 스칼라여야 한다.
    """
    column_values: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in doc.items():
        # json_set 경로($."key")에 넣을 수 없는 키
        if not key or '"' in key:
            raise DocumentError(f"invalid field name: {key!r}")
        if key in columns:
            if isinstance(value, bool) or not isinstance(value, _SCALAR_TYPES):
                raise DocumentError(f"'{key}' must be a string or number")
            column_values[columns[key]] = value
        else:
            extra[key] = value
    return column_values, extra


def marathon_from_row(row: sqlite3.Row) -> Dict[str, Any]:
    doc = json.loads(row["data"] or "{}")
    doc.update({
        "_id": row["id"],
        "creatorEmail": row["creator_email"],
        "createdAt": row["created_at"],
        "totalRegistrationCount": row["total_registration_count"],
    })
    return doc


def registration_from_row(row: sqlite3.Row) -> Dict[str, Any]:
    doc = json.loads(row["data"] or "{}")
    doc.update({
        "_id": row["id"],
        "marathonId": row["marathon_id"],
        "email": row["email"],
        "marathonTitle": row["marathon_title"],
    })
    return doc
