# Gunicorn configuration for the interview API
# Transcripts live in process memory, so a single worker keeps every session on one registry.
wsgi_app = "interview_app.main:app"
bind = "0.0.0.0:8000"
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
keepalive = 120
timeout = 90
loglevel = "info"
accesslog = "-"
errorlog = "-"
