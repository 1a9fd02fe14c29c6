import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Импортируем логгеры
from src.logs.server_log import api_logger
from src.logs.debug_log import debug_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with its status and processing time"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"

        # Детали запроса (заголовки авторизации маскируются)
        debug_logger.log_request(request)

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            debug_logger.log_exception(f"Ошибка при обработке запроса {method} {path}")
            api_logger.error(f"Error processing request {method} {path}: {str(e)}")
            raise

        process_time = time.time() - start_time
        log_message = (
            f"Request: {method} {path} | "
            f"Status: {response.status_code} | "
            f"Client: {client_host} | "
            f"Process Time: {process_time:.3f}s"
        )
        if response.status_code >= 500:
            api_logger.error(log_message)
        elif response.status_code >= 400:
            api_logger.warning(log_message)
        else:
            api_logger.info(log_message)

        debug_logger.log_response(response, process_time)
        return response
