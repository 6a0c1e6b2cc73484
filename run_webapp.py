#!/usr/bin/env python3
"""
웹앱 실행 스크립트
사용법: python run_webapp.py
"""
import sys
from pathlib import Path

# 프로젝트 루트를 파이썬 경로에 추가
sys.path.insert(0, str(Path(__file__).parent))

from webapp.app import create_app
from config.settings import DB_PATH, WEBAPP_HOST, WEBAPP_PORT, WEBAPP_DEBUG, APP_ENV


def main():
    print("=" * 50)
    print("Marathon Registration API")
    print("=" * 50)

    # 1. 앱 생성 (DB 스키마 포함)
    print("\n[1/2] Initializing database...")
    app = create_app()
    print(f"✓ Database ready: {DB_PATH}")

    # 2. 서버 실행
    print(f"\n[2/2] Starting web server...")
    print(f"→ URL: http://{WEBAPP_HOST}:{WEBAPP_PORT}")
    print(f"→ Mode: {APP_ENV}")
    print(f"→ Debug: {WEBAPP_DEBUG}")
    print(f"→ Press Ctrl+C to stop\n")

    app.run(
        host=WEBAPP_HOST,
        port=WEBAPP_PORT,
        debug=WEBAPP_DEBUG
    )


if __name__ == "__main__":
    main()
