"""
Correlation ID middleware for Flask application
Tags every request and its log lines with an X-Correlation-ID
"""
import uuid
import logging
from contextvars import ContextVar
from flask import Response, g, request, current_app, has_app_context

CORRELATION_HEADER = 'X-Correlation-ID'

# Context variable holding the correlation ID of the current request
correlation_id_context: ContextVar[str] = ContextVar('correlation_id', default='')


class CorrelationIdMiddleware:
    """
    Flask middleware for handling correlation IDs
    """

    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize the middleware with Flask app"""
        app.before_request(self.before_request)
        app.after_request(self.after_request)

    def before_request(self):
        """Reuse the caller's correlation ID or mint one"""
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())

        g.correlation_id = correlation_id
        correlation_id_context.set(correlation_id)

        current_app.logger.info(f"{request.method} {request.path} - Processing request")

    def after_request(self, response: Response) -> Response:
        """Echo the correlation ID on the response"""
        correlation_id = getattr(g, 'correlation_id', None) or get_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id

        current_app.logger.info(
            f"{request.method} {request.path} - Response: {response.status_code}"
        )
        return response


def get_correlation_id() -> str:
    """Current correlation ID, or 'unknown' outside a request"""
    if has_app_context() and hasattr(g, 'correlation_id'):
        return g.correlation_id
    return correlation_id_context.get() or 'unknown'


class CorrelationIdFormatter(logging.Formatter):
    """Formatter that prefixes log lines with the correlation ID"""

    def format(self, record):
        record.correlation_id = get_correlation_id()
        return super().format(record)


def init_correlation_id_logging(app):
    """
    Apply the correlation ID formatter to the app logger handlers
    """
    formatter = CorrelationIdFormatter(
        '[%(correlation_id)s] %(levelname)s in %(module)s: %(message)s'
    )

    for handler in app.logger.handlers:
        handler.setFormatter(formatter)
