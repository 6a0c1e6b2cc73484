# webapp/services/reconcile.py
"""등록 카운터 재계산"""

import logging
from typing import Dict, List

from core.database import Database
from core.models import registration_from_row

logger = logging.getLogger(__name__)

DRIFT_SQL = """
SELECT m.id AS id,
       m.total_registration_count AS stored,
       COUNT(r.id) AS actual
FROM marathons m
LEFT JOIN registrations r ON r.marathon_id = m.id
GROUP BY m.id
HAVING stored != actual
ORDER BY m.id
"""


class ReconcileService:
    """
    totalRegistrationCount 와 실제 등록 수가 어긋난 마라톤을 찾아 맞춘다.

    등록 생성/삭제가 두 단계로 나뉘어 있어서 중간에 프로세스가 죽거나
    마라톤이 먼저 삭제되면 카운터가 어긋날 수 있다. 주기적으로
    run_reconcile.py 로 실행한다.
    """

    def __init__(self, db: Database):
        self.db = db

    def find_drift(self) -> List[Dict]:
        """[{'_id', 'stored', 'actual'}, ...]"""
        with self.db.connect() as conn:
            rows = conn.execute(DRIFT_SQL).fetchall()
            return [{"_id": r["id"], "stored": r["stored"], "actual": r["actual"]} for r in rows]

    def reconcile(self) -> List[Dict]:
        """
        어긋난 카운터를 실제 등록 수로 덮어쓴다 (한 트랜잭션)

        Returns:
            고친 항목 목록 (find_drift 와 같은 모양)
        """
        with self.db.connect() as conn:
            # 조회~수정 사이에 다른 쓰기가 끼지 않도록 쓰기 잠금부터
            conn.execute("BEGIN IMMEDIATE")
            try:
                rows = conn.execute(DRIFT_SQL).fetchall()
                drift = [{"_id": r["id"], "stored": r["stored"], "actual": r["actual"]} for r in rows]
                for item in drift:
                    conn.execute(
                        "UPDATE marathons SET total_registration_count=? WHERE id=?",
                        (item["actual"], item["_id"])
                    )
                conn.commit()
            except Exception:
                conn.rollback()
                raise

        for item in drift:
            logger.warning(
                "marathon %s count corrected %s -> %s",
                item["_id"], item["stored"], item["actual"]
            )
        return drift

    def orphaned_registrations(self) -> List[Dict]:
        """삭제된 마라톤을 가리키는 등록 (보고만 하고 지우지 않음)"""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT r.* FROM registrations r
                   LEFT JOIN marathons m ON m.id = r.marathon_id
                   WHERE m.id IS NULL
                   ORDER BY r.id"""
            ).fetchall()
            return [registration_from_row(row) for row in rows]
