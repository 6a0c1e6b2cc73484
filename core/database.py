import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS marathons (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  creator_email TEXT,
  created_at TEXT NOT NULL,
  total_registration_count INTEGER NOT NULL DEFAULT 0,
  data TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_marathons_creator ON marathons(creator_email);
CREATE INDEX IF NOT EXISTS idx_marathons_created_at ON marathons(created_at);

-- marathon_id 는 참조만 한다 (FK/CASCADE 없음, 카운터는 코디네이터가 관리)
CREATE TABLE IF NOT EXISTS registrations (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  marathon_id INTEGER NOT NULL,
  email TEXT,
  marathon_title TEXT,
  data TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_registrations_marathon ON registrations(marathon_id);
CREATE INDEX IF NOT EXISTS idx_registrations_email ON registrations(email);
"""


class Database:
    """
    sqlite 저장소 핸들

    앱마다 하나씩 만들어 서비스에 주입한다. 연결은 작업 단위로 열고 닫는다.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """DB 연결 컨텍스트 매니저"""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        # busy timeout (동시 쓰기 대기)
        conn.execute("PRAGMA busy_timeout=5000")
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        try:
            yield conn
        finally:
            conn.close()

    def init_database(self):
        """데이터베이스 초기화"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
        self.migrate_database()

    def migrate_database(self):
        """스키마 마이그레이션 (예전 DB에 없는 컬럼 보강)"""
        with self.connect() as conn:
            for table, col, ddl in [
                ("marathons", "creator_email", "ALTER TABLE marathons ADD COLUMN creator_email TEXT"),
                ("marathons", "total_registration_count",
                 "ALTER TABLE marathons ADD COLUMN total_registration_count INTEGER NOT NULL DEFAULT 0"),
                ("registrations", "marathon_title", "ALTER TABLE registrations ADD COLUMN marathon_title TEXT"),
            ]:
                if not _column_exists(conn, table, col):
                    conn.execute(ddl)
            conn.commit()


def _casefold(value):
    """SQL casefold(): 유니코드 대소문자 무시 비교용"""
    return str(value).casefold() if value is not None else None


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    cur = conn.execute(f"PRAGMA table_info('{table}')")
    return any(row["name"] == column for row in cur.fetchall())
