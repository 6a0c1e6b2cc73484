# webapp/services/marathon.py
"""마라톤 비즈니스 로직"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from config.constants import (
    HOME_MARATHON_LIMIT,
    INTERNAL,
    INTERNAL_ERROR_MESSAGE,
    NOT_FOUND,
    PROTECTED_MARATHON_FIELDS,
    VALIDATION,
)
from core.database import Database
from core.models import MARATHON_COLUMNS, DocumentError, marathon_from_row, split_document
from utils.query_utils import id_in_range, json_set_clause, sort_direction

logger = logging.getLogger(__name__)


class MarathonService:
    """
    마라톤 관련 비즈니스 로직

    주요 기능:
    - 마라톤 CRUD (생성, 조회, 수정, 삭제)
    - 작성자(creatorEmail) 필터 + createdAt 정렬

    totalRegistrationCount 는 여기서 쓰지 않는다 (RegistrationService 담당).
    """

    def __init__(self, db: Database):
        self.db = db

    # ---------- 조회 ----------
    def list_marathons(self, email: Optional[str] = None, sort: Optional[str] = None) -> List[Dict]:
        """
        마라톤 목록 조회

        Args:
            email: 작성자 이메일 (None이면 전체)
            sort: 'desc' 면 최신순, 그 외 오래된 순

        Returns:
            마라톤 목록
        """
        direction = sort_direction(sort)
        query = "SELECT * FROM marathons"
        params: List[Any] = []
        if email:
            query += " WHERE creator_email=?"
            params.append(email)
        query += f" ORDER BY created_at {direction}, id {direction}"

        with self.db.connect() as conn:
            rows = conn.execute(query, params).fetchall()
            return [marathon_from_row(row) for row in rows]

    def list_home_marathons(self, limit: int = HOME_MARATHON_LIMIT) -> List[Dict]:
        """홈 화면용: 등록 순서대로 앞의 limit 개"""
        with self.db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM marathons ORDER BY id LIMIT ?",
                (limit,)
            ).fetchall()
            return [marathon_from_row(row) for row in rows]

    def get_marathon(self, marathon_id: int) -> Optional[Dict]:
        """
        특정 마라톤 조회

        Returns:
            마라톤 정보 또는 None
        """
        if not id_in_range(marathon_id):
            return None
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM marathons WHERE id=?",
                (marathon_id,)
            ).fetchone()

            return marathon_from_row(row) if row else None

    # ---------- 생성/수정/삭제 ----------
    def create_marathon(self, doc: Any) -> Dict:
        """
        새 마라톤 생성

        본문 필드는 그대로 저장한다. createdAt 이 없으면 지금 시각.

        Returns:
            {'success': True, 'insertedId': int} 또는 실패 결과
        """
        if not isinstance(doc, dict):
            return {'success': False, 'reason': VALIDATION, 'error': 'Marathon must be a JSON object'}

        doc = {k: v for k, v in doc.items() if k not in PROTECTED_MARATHON_FIELDS}
        try:
            columns, extra = split_document(doc, MARATHON_COLUMNS)
        except DocumentError as e:
            return {'success': False, 'reason': VALIDATION, 'error': str(e)}

        if columns.get('created_at') is None:
            columns['created_at'] = datetime.now(timezone.utc).isoformat()

        names = list(columns) + ['data']
        values = list(columns.values()) + [json.dumps(extra)]

        try:
            with self.db.connect() as conn:
                cursor = conn.execute(
                    f"INSERT INTO marathons({', '.join(names)}) "
                    f"VALUES({', '.join('?' for _ in names)})",
                    values
                )
                conn.commit()

            if not cursor.lastrowid:
                return {'success': False, 'reason': VALIDATION, 'error': 'Failed to create marathon'}

            logger.info("marathon %s created by %s", cursor.lastrowid, columns.get('creator_email'))
            return {'success': True, 'insertedId': cursor.lastrowid}

        except Exception:
            logger.exception("create marathon failed")
            return {'success': False, 'reason': INTERNAL, 'error': INTERNAL_ERROR_MESSAGE}

    def update_marathon(self, marathon_id: int, fields: Any) -> Dict:
        """
        마라톤 정보 부분 수정

        보낸 필드만 덮어쓰고 나머지는 그대로 둔다.
        존재 여부는 UPDATE 결과(영향 받은 행 수)로만 판단한다.

        Returns:
            {'success': bool, 'matchedCount': int, 'error': str}
        """
        if not id_in_range(marathon_id):
            return {'success': False, 'reason': NOT_FOUND, 'error': 'Marathon not found'}
        if not isinstance(fields, dict):
            return {'success': False, 'reason': VALIDATION, 'error': 'Update must be a JSON object'}

        fields = {k: v for k, v in fields.items() if k not in PROTECTED_MARATHON_FIELDS}
        if not fields:
            return {'success': False, 'reason': VALIDATION, 'error': 'No fields to update'}

        try:
            columns, extra = split_document(fields, MARATHON_COLUMNS)
        except DocumentError as e:
            return {'success': False, 'reason': VALIDATION, 'error': str(e)}

        if 'created_at' in columns and columns['created_at'] is None:
            return {'success': False, 'reason': VALIDATION, 'error': "'createdAt' cannot be null"}

        data_expr, data_params = json_set_clause(extra)
        assignments = [f"{col}=?" for col in columns] + [f"data={data_expr}"]
        values = list(columns.values()) + data_params + [marathon_id]

        try:
            with self.db.connect() as conn:
                cursor = conn.execute(
                    f"UPDATE marathons SET {', '.join(assignments)} WHERE id=?",
                    values
                )
                conn.commit()

            if cursor.rowcount == 0:
                return {'success': False, 'reason': NOT_FOUND, 'error': 'Marathon not found'}
            return {'success': True, 'matchedCount': cursor.rowcount}

        except Exception:
            logger.exception("update marathon %s failed", marathon_id)
            return {'success': False, 'reason': INTERNAL, 'error': INTERNAL_ERROR_MESSAGE}

    def delete_marathon(self, marathon_id: int) -> Dict:
        """
        마라톤 삭제 (이미 없으면 deletedCount=0, 성공)

        이 마라톤을 가리키는 등록은 지우지 않는다.
        """
        if not id_in_range(marathon_id):
            return {'success': True, 'deletedCount': 0}
        try:
            with self.db.connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM marathons WHERE id=?",
                    (marathon_id,)
                )
                conn.commit()

            if cursor.rowcount:
                logger.info("marathon %s deleted", marathon_id)
            return {'success': True, 'deletedCount': cursor.rowcount}

        except Exception:
            logger.exception("delete marathon %s failed", marathon_id)
            return {'success': False, 'reason': INTERNAL, 'error': INTERNAL_ERROR_MESSAGE}
