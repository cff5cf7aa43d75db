import time
import logging
from fastapi import Request

logger = logging.getLogger("access")

PROCESS_TIME_HEADER = "X-Process-Time-Ms"


async def request_logging_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    # set by get_current_user on authenticated routes
    username = getattr(request.state, "username", "-")

    response.headers[PROCESS_TIME_HEADER] = str(elapsed_ms)
    logger.info(
        "",
        extra={
            "client_addr": request.client.host if request.client else "unknown",
            "username": username,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": elapsed_ms,
        },
    )

    return response
