import os

wsgi_app = "wsgi:app"

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
# Covers the reminder scheduler timeout plus the request itself.
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; the app logs JSON to stdout as well
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")
