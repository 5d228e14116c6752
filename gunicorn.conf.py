"""
Gunicorn configuration for running the AccrediGo API in production:

    gunicorn main:app -c gunicorn.conf.py
"""
import multiprocessing
import os
from pathlib import Path

from framework.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Server
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Workers: each owns its own engine pool (DatabaseManager is created lazily, after fork)
workers = int(os.getenv("GUNICORN_WORKERS", min(multiprocessing.cpu_count() * 2 + 1, 8)))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 1000
max_requests_jitter = 50
timeout = 60
keepalive = 5
graceful_timeout = 30

proc_name = (settings.GUNICORN_PROC_NAME or settings.APP_NAME.lower().replace(" ", "-"))[:32]

# Logging
accesslog = str(LOG_DIR / "gunicorn_access.log")
errorlog = str(LOG_DIR / "gunicorn_error.log")
loglevel = "debug" if settings.DEBUG else "info"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)sus trace=%({x-trace-id}o)s'

daemon = False
pidfile = str(LOG_DIR / "gunicorn.pid")
preload_app = True
worker_tmp_dir = "/dev/shm"

limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190

def when_ready(server):
    server.log.info("%s %s (%s) is ready. Listening on %s",
                    settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV, server.address)

def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)

def worker_abort(worker):
    worker.log.warning("Worker %s aborted (timeout after %ss)", worker.pid, timeout)

def on_exit(server):
    server.log.info("%s is shutting down.", settings.APP_NAME)
