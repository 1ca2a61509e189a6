"""Gunicorn configuration for KWSK controller API."""

import multiprocessing
import os

# Application
wsgi_app = "kwsk:create_app()"

# Server socket
bind = f"0.0.0.0:{os.getenv('PORT', 8080)}"
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
timeout = 30
keepalive = 2

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = (
    '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
)

# Server mechanics
daemon = False
pidfile = None

# Configuration errors abort in the master, before any worker forks
preload_app = True
forwarded_allow_ips = "*"

# Process naming
proc_name = "kwsk-controller"

# Environment
raw_env = [
    "PYTHONUNBUFFERED=1",
]
