import os

wsgi_app = "config.wsgi:application"
bind = os.getenv("CHECKOUT_BIND", "0.0.0.0:8000")


def cpu():
    return max(1, (os.cpu_count() or 1))


# Workers: checkout is I/O bound (database, Stripe)
workers = int(os.getenv("CHECKOUT_WORKERS", str(min(max(2, cpu() * 2), 8))))
worker_class = "gthread"
threads = int(os.getenv("CHECKOUT_THREADS", "4"))

# Stripe calls are bounded by STRIPE_TIMEOUT_SECS and its retries
timeout = int(os.getenv("CHECKOUT_TIMEOUT", "60"))
graceful_timeout = int(os.getenv("CHECKOUT_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("CHECKOUT_KEEPALIVE", "5"))

preload_app = True
max_requests = int(os.getenv("CHECKOUT_MAX_REQUESTS", "2000"))
max_requests_jitter = int(os.getenv("CHECKOUT_MAX_REQUESTS_JITTER", "200"))

# Application logs are JSON (see LOGGING in config.settings)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("CHECKOUT_LOGLEVEL", "info")
