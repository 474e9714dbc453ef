from .request_logger import RequestLoggingMiddleware
