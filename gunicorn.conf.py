# gunicorn.conf.py
"""
Gunicorn settings for the SRM API.

    gunicorn srm.wsgi:application -c gunicorn.conf.py

Every value can be overridden through a GUNICORN_* environment variable.
"""
import multiprocessing
import os


def _env_int(name, default):
    return int(os.environ.get(name, default))


bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')
workers = _env_int('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1)
timeout = _env_int('GUNICORN_TIMEOUT', 60)
graceful_timeout = _env_int('GUNICORN_GRACEFUL_TIMEOUT', 30)

# Recycle workers now and then to cap slow memory growth
max_requests = _env_int('GUNICORN_MAX_REQUESTS', 1000)
max_requests_jitter = 50

preload_app = True
proc_name = 'srm-api'

# Access and error logs go to stdout/stderr next to the Django LOGGING output
accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()

# TLS terminates at the reverse proxy
forwarded_allow_ips = os.environ.get('GUNICORN_FORWARDED_ALLOW_IPS', '127.0.0.1')
secure_scheme_headers = {'X-FORWARDED-PROTO': 'https'}
