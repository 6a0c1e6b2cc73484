# webapp/services/registration.py
"""마라톤 등록 비즈니스 로직"""

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from config.constants import (
    DELETE_FAILED,
    INTERNAL,
    INTERNAL_ERROR_MESSAGE,
    NOT_FOUND,
    PROTECTED_REGISTRATION_FIELDS,
    VALIDATION,
)
from core.database import Database
from core.models import REGISTRATION_COLUMNS, DocumentError, registration_from_row, split_document
from utils.query_utils import LIKE_ESCAPE, coerce_id, escape_like, id_in_range, json_set_clause

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    등록 관련 비즈니스 로직

    주요 기능:
    - 등록 CRUD
    - 등록 생성/삭제 시 마라톤 totalRegistrationCount +1 / -1

    등록 행과 카운터는 서로 다른 트랜잭션으로 쓴다.
    두 번째 단계(카운터)가 아무 행도 못 찾으면 경고만 남기고 성공으로 처리한다.
    어긋난 카운터는 ReconcileService 가 다시 맞춘다.
    """

    def __init__(self, db: Database):
        self.db = db

    # ---------- 조회 ----------
    def list_registrations(self, email: Optional[str] = None, search: Optional[str] = None) -> List[Dict]:
        """
        등록 목록 조회

        Args:
            email: 등록자 이메일
            search: marathonTitle 부분 일치 (대소문자 무시)
        """
        conds, params = [], []
        if email:
            conds.append("email=?")
            params.append(email)
        if search:
            # LIKE 는 ASCII 만 대소문자를 무시하므로 양쪽 다 casefold
            conds.append(f"casefold(marathon_title) LIKE ? ESCAPE '{LIKE_ESCAPE}'")
            params.append(f"%{escape_like(search.casefold())}%")
        where = (" WHERE " + " AND ".join(conds)) if conds else ""

        with self.db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM registrations" + where + " ORDER BY id",
                params
            ).fetchall()
            return [registration_from_row(row) for row in rows]

    def get_registration(self, registration_id: int) -> Optional[Dict]:
        if not id_in_range(registration_id):
            return None
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM registrations WHERE id=?",
                (registration_id,)
            ).fetchone()
            return registration_from_row(row) if row else None

    # ---------- 생성/삭제 (카운터 연동) ----------
    def create_registration(self, doc: Any) -> Dict:
        """
        등록 생성 후 대상 마라톤 카운터 +1

        1) 등록 INSERT (커밋). id 가 안 나오면 실패
        2) marathonId 의 카운터 +1. 마라톤이 없어도 등록은 성공
        예외가 나면 일반 오류로 응답하고 1) 은 되돌리지 않는다.

        Returns:
            {'success': True, 'insertedId': int} 또는 실패 결과
        """
        if not isinstance(doc, dict):
            return {'success': False, 'reason': VALIDATION, 'error': 'Registration must be a JSON object'}

        marathon_id = coerce_id(doc.get('marathonId'))
        if marathon_id is None:
            return {'success': False, 'reason': VALIDATION, 'error': 'marathonId is required'}

        doc = {
            k: v for k, v in doc.items()
            if k not in PROTECTED_REGISTRATION_FIELDS and k != 'marathonId'
        }
        try:
            columns, extra = split_document(doc, REGISTRATION_COLUMNS)
        except DocumentError as e:
            return {'success': False, 'reason': VALIDATION, 'error': str(e)}

        names = ['marathon_id'] + list(columns) + ['data']
        values = [marathon_id] + list(columns.values()) + [json.dumps(extra)]

        try:
            with self.db.connect() as conn:
                cursor = conn.execute(
                    f"INSERT INTO registrations({', '.join(names)}) "
                    f"VALUES({', '.join('?' for _ in names)})",
                    values
                )
                conn.commit()
                registration_id = cursor.lastrowid
                if not registration_id:
                    return {'success': False, 'reason': VALIDATION, 'error': 'Failed to register for marathon'}

                if not self._adjust_count(conn, marathon_id, 1):
                    logger.warning(
                        "registration %s references missing marathon %s; count not incremented",
                        registration_id, marathon_id
                    )

            logger.info("registration %s created for marathon %s", registration_id, marathon_id)
            return {'success': True, 'insertedId': registration_id}

        except Exception:
            logger.exception("create registration for marathon %s failed", marathon_id)
            return {'success': False, 'reason': INTERNAL, 'error': INTERNAL_ERROR_MESSAGE}

    def delete_registration(self, registration_id: int) -> Dict:
        """
        등록 삭제 후 대상 마라톤 카운터 -1

        순서: 조회(marathonId 확보) -> 삭제 -> 카운터 -1
        - 등록이 없으면 NotFound, 카운터는 건드리지 않음
        - 삭제된 행이 0 이면 (동시 삭제) 실패, 카운터는 건드리지 않음
        - 마라톤이 없으면 경고만 남기고 삭제는 성공
        """
        if not id_in_range(registration_id):
            return {'success': False, 'reason': NOT_FOUND, 'error': 'Registration not found'}
        try:
            with self.db.connect() as conn:
                marathon_id = self._read_marathon_id(conn, registration_id)
                if marathon_id is None:
                    return {'success': False, 'reason': NOT_FOUND, 'error': 'Registration not found'}

                cursor = conn.execute(
                    "DELETE FROM registrations WHERE id=?",
                    (registration_id,)
                )
                conn.commit()
                if cursor.rowcount == 0:
                    return {'success': False, 'reason': DELETE_FAILED, 'error': 'Failed to delete registration'}

                if not self._adjust_count(conn, marathon_id, -1):
                    logger.warning(
                        "deleted registration %s references missing marathon %s; count not decremented",
                        registration_id, marathon_id
                    )

            logger.info("registration %s deleted (marathon %s)", registration_id, marathon_id)
            return {'success': True, 'deletedCount': cursor.rowcount}

        except Exception:
            logger.exception("delete registration %s failed", registration_id)
            return {'success': False, 'reason': INTERNAL, 'error': INTERNAL_ERROR_MESSAGE}

    # ---------- 수정 ----------
    def update_registration(self, registration_id: int, fields: Any) -> Dict:
        """
        등록 정보 부분 수정

        marathonId 는 바꿀 수 없다 (같은 값이면 허용).
        """
        if not id_in_range(registration_id):
            return {'success': False, 'reason': NOT_FOUND, 'error': 'Registration not found'}
        if not isinstance(fields, dict):
            return {'success': False, 'reason': VALIDATION, 'error': 'Update must be a JSON object'}

        fields = {k: v for k, v in fields.items() if k not in PROTECTED_REGISTRATION_FIELDS}
        marathon_id = None
        if 'marathonId' in fields:
            marathon_id = coerce_id(fields.pop('marathonId'))
            if marathon_id is None:
                return {'success': False, 'reason': VALIDATION, 'error': 'marathonId cannot be changed'}
        if not fields:
            return {'success': False, 'reason': VALIDATION, 'error': 'No fields to update'}

        try:
            columns, extra = split_document(fields, REGISTRATION_COLUMNS)
        except DocumentError as e:
            return {'success': False, 'reason': VALIDATION, 'error': str(e)}

        data_expr, data_params = json_set_clause(extra)
        assignments = [f"{col}=?" for col in columns] + [f"data={data_expr}"]
        values = list(columns.values()) + data_params + [registration_id]
        where = "id=?"
        if marathon_id is not None:
            where += " AND marathon_id=?"
            values.append(marathon_id)

        try:
            with self.db.connect() as conn:
                cursor = conn.execute(
                    f"UPDATE registrations SET {', '.join(assignments)} WHERE {where}",
                    values
                )
                conn.commit()

                if cursor.rowcount == 0:
                    # marathonId 불일치인지, 아예 없는 등록인지 구분
                    if marathon_id is not None and self._read_marathon_id(conn, registration_id) is not None:
                        return {'success': False, 'reason': VALIDATION, 'error': 'marathonId cannot be changed'}
                    return {'success': False, 'reason': NOT_FOUND, 'error': 'Registration not found'}

            return {'success': True, 'matchedCount': cursor.rowcount}

        except Exception:
            logger.exception("update registration %s failed", registration_id)
            return {'success': False, 'reason': INTERNAL, 'error': INTERNAL_ERROR_MESSAGE}

    # ---------- 내부 ----------
    def _read_marathon_id(self, conn: sqlite3.Connection, registration_id: int) -> Optional[int]:
        row = conn.execute(
            "SELECT marathon_id FROM registrations WHERE id=?",
            (registration_id,)
        ).fetchone()
        return row["marathon_id"] if row else None

    @staticmethod
    def _adjust_count(conn: sqlite3.Connection, marathon_id: int, delta: int) -> int:
        """카운터 원자적 증감. 영향 받은 마라톤 수(0 또는 1) 반환"""
        cursor = conn.execute(
            "UPDATE marathons SET total_registration_count = total_registration_count + ? WHERE id=?",
            (delta, marathon_id)
        )
        conn.commit()
        return cursor.rowcount
