import os

# Server socket - bind to localhost only (Nginx will proxy)
bind = os.getenv("BIND", "127.0.0.1:8000")
backlog = 2048

# Worker count
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = 60
keepalive = 5

# Restart workers after this many requests to prevent memory leaks
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = os.getenv("ACCESS_LOG", "-")
errorlog = os.getenv("ERROR_LOG", "-")
loglevel = "info"

# Process naming
proc_name = "moderator-hub"

# Every worker runs the app lifespan and starts its own scheduler, so the
# disciplinary expiry sweep runs once per worker. The sweep is idempotent;
# set ENABLE_SCHEDULER=false on extra deployments to keep it to one host.
preload_app = False
