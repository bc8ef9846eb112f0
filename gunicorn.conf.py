"""
Gunicorn configuration for the JobLinkHub API.

Run with: gunicorn -c gunicorn.conf.py
"""
import os

wsgi_app = "joblinkhub.main:app"

# Server socket
bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '8000')}"

# Uvicorn workers serve the ASGI app
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"

# Recycle workers periodically, staggered
max_requests = 1000
max_requests_jitter = 100

timeout = 30
keepalive = 5
graceful_timeout = 30

proc_name = "joblinkhub_api"

# Logging (application logs go through structlog on stdout)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    server.log.info("JobLinkHub API ready, spawning %s workers", workers)


def worker_abort(worker):
    worker.log.warning("Worker %s aborted (request exceeded %ss)", worker.pid, timeout)
