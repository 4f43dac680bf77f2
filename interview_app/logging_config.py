import sys
import logging
import os
import uuid
from typing import Optional
from loguru import logger
from fastapi import Request

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level> {extra}"
)

# Third-party loggers routed into loguru
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "httpx")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the original caller."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", log_dir: Optional[str] = "logs"):
    """
    Console sink at `level`, plus a rotating DEBUG file sink when log_dir is set.
    Variable values are kept out of tracebacks since requests carry the Groq key.
    """
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True, backtrace=True, diagnose=False)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            os.path.join(log_dir, "interview_app_{time:YYYY-MM-DD}.log"),
            format=LOG_FORMAT,
            level="DEBUG",
            rotation="10 MB",
            retention="10 days",
            compression="zip",
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    logger.info(f"Logging initialized (level={level}, log_dir={log_dir or 'disabled'})")


async def logging_middleware(request: Request, call_next):
    """Tag every log line of a request with a request_id."""
    with logger.contextualize(request_id=uuid.uuid4().hex[:12]):
        logger.info(f"{request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response
