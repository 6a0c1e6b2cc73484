import os
from pathlib import Path

from dotenv import load_dotenv

# ============= 경로 설정 =============
BASE_DIR = Path(__file__).parent.parent.absolute()

# .env 가 있으면 먼저 읽는다 (이미 설정된 환경변수는 덮어쓰지 않음)
load_dotenv(BASE_DIR / ".env")

DB_PATH = Path(os.getenv("MARATHON_DB_PATH", str(BASE_DIR / "marathon.db")))

# 웹앱 설정
WEBAPP_HOST = os.getenv("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = int(os.getenv("PORT", "5000"))
WEBAPP_DEBUG = os.getenv("WEBAPP_DEBUG", "0") == "1"

# 배포 모드: production 이면 쿠키에 secure + SameSite=None
APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
IS_PRODUCTION = APP_ENV == "production"

# 토큰 서명 키
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-secret-change-me")

# CORS 허용 origin (쉼표로 구분)
# 예: CORS_ORIGINS="http://localhost:5173,https://marathon.example.com"
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
