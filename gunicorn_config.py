"""Gunicorn configuration for production."""
import os

wsgi_app = "fileshare:create_app()"

# Server socket
port = os.getenv("PORT", "4000")
bind = f"0.0.0.0:{port}"
backlog = 2048

# Worker processes
# The message store and broadcast channel live in process memory by default,
# so a single worker is required unless both are switched to Redis.
workers_env = os.getenv("GUNICORN_WORKERS")
if workers_env:
    workers = int(workers_env)
else:
    workers = 1

# WebSocket subscriptions hold a thread each for the life of the connection
worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", "100"))
timeout = 120
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stdout
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

capture_output = True
enable_stdio_inheritance = True

# Process naming
proc_name = "fileshare"

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None
