"""
Request logging for the API: one line per request with timing.
"""
import time
import logging
import json
from flask import request, g

logger = logging.getLogger(__name__)


class RequestLogger:
    """Logs method, path, status and duration of every request"""

    @staticmethod
    def before_request():
        """Record request start time"""
        g.start_time = time.time()
        g.request_id = f"{int(time.time() * 1000000)}"  # Microsecond precision

    @staticmethod
    def after_request(response):
        """Log request information once the response is ready"""
        if not hasattr(g, 'start_time'):
            return response

        duration_ms = (time.time() - g.start_time) * 1000

        log_data = {
            'request_id': getattr(g, 'request_id', 'unknown'),
            'method': request.method,
            'path': request.path,
            'endpoint': request.endpoint,
            'remote_addr': request.remote_addr,
            'duration_ms': round(duration_ms, 2),
            'status_code': response.status_code,
        }
        if request.args:
            log_data['query_params'] = dict(request.args)

        # Log based on status code
        log_level = logging.INFO
        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400:
            log_level = logging.WARNING

        logger.log(log_level, f"REQUEST_LOG: {json.dumps(log_data, default=str)}")
        response.headers['X-Request-ID'] = log_data['request_id']
        return response

    @classmethod
    def init_app(cls, app):
        app.before_request(cls.before_request)
        app.after_request(cls.after_request)
