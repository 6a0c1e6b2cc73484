# run_webapp_wsgi.py
# 실행 : waitress-serve --listen=0.0.0.0:5000 --threads=8 run_webapp_wsgi:app
from webapp.app import create_app

app = create_app()
