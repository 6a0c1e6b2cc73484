#!/usr/bin/env python3
"""
등록 카운터 재계산 스크립트
사용법:
    python run_reconcile.py              # 어긋난 카운터 수정
    python run_reconcile.py --dry-run    # 보고만
"""
import sys
import argparse
from pathlib import Path

# 프로젝트 루트를 파이썬 경로에 추가
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import DB_PATH, LOG_LEVEL
from core.database import Database
from webapp.app import configure_logging
from webapp.services.reconcile import ReconcileService


def parse_args(argv=None):
    """명령행 인수 파싱"""
    parser = argparse.ArgumentParser(
        description='totalRegistrationCount 를 실제 등록 수로 다시 맞춥니다',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  python run_reconcile.py              # 수정
  python run_reconcile.py --dry-run    # 어긋난 항목만 출력

cron 등으로 주기 실행하면 카운터 오차가 그 주기 안으로 줄어듭니다.
        """
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='수정하지 않고 어긋난 마라톤만 출력'
    )
    parser.add_argument(
        '--db',
        default=str(DB_PATH),
        help=f'sqlite 파일 경로 (기본: {DB_PATH})'
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(LOG_LEVEL)

    db = Database(args.db)
    db.init_database()
    service = ReconcileService(db)

    if args.dry_run:
        drift = service.find_drift()
        print(f"[Dry run] {len(drift)} marathon(s) out of sync")
    else:
        drift = service.reconcile()
        print(f"[Reconcile] {len(drift)} marathon(s) corrected")

    for item in drift:
        print(f"  • marathon {item['_id']}: stored={item['stored']} actual={item['actual']}")

    orphans = service.orphaned_registrations()
    if orphans:
        print(f"[Warn] {len(orphans)} registration(s) reference deleted marathons")
        for r in orphans:
            print(f"  • registration {r['_id']} -> marathon {r['marathonId']}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
