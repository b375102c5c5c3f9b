"""
日志配置

日志目录结构（SHOP_ADMIN_LOG_DIR，默认项目根目录下的 logs/）：
logs/
└── platform/
    ├── app.log       # 应用主日志，按大小轮转
    ├── error.log     # ERROR 及以上
    └── access.log    # HTTP 访问日志，每天零点轮转
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_DIR = Path(os.getenv("SHOP_ADMIN_LOG_DIR", DEFAULT_LOG_DIR))
PLATFORM_LOG_DIR = LOG_DIR / "platform"

ACCESS_LOGGER_NAME = "shop_admin.access"

DETAILED_FORMAT = (
    "%(asctime)s | "
    "PID:%(process)d | "
    "Thread:%(threadName)s | "
    "%(levelname)-8s | "
    "%(name)s | "
    "[%(filename)s:%(lineno)d:%(funcName)s] | "
    "%(message)s"
)
SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def _rotating_file(path: Path, level: int, max_mb: int, backups: int) -> logging.Handler:
    handler = RotatingFileHandler(
        path,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    to_file: bool = True,
) -> None:
    """配置根 logger：控制台输出，外加 app.log / error.log 两个轮转文件。

    重复调用会先移除已有的 handler，不会重复输出。
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    log_directory = log_dir or PLATFORM_LOG_DIR
    if to_file:
        log_directory.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_file(log_directory / "app.log", level, max_mb=50, backups=10))
        root_logger.addHandler(_rotating_file(log_directory / "error.log", logging.ERROR, max_mb=20, backups=5))

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    get_logger(__name__).info(f"Logging initialized: dir={log_directory}, level={log_level}, file={to_file}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_access_logging(log_dir: Optional[Path] = None) -> logging.Logger:
    """HTTP 访问日志单独写 access.log，不向根 logger 传播"""
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False
    # 每个 app 实例都会创建中间件，handler 只挂一次
    if access_logger.handlers:
        return access_logger

    log_directory = log_dir or PLATFORM_LOG_DIR
    log_directory.mkdir(parents=True, exist_ok=True)
    access_handler = TimedRotatingFileHandler(
        log_directory / "access.log",
        when="midnight",
        backupCount=30,
        encoding="utf-8",
    )
    access_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, DATE_FORMAT))
    access_logger.addHandler(access_handler)
    return access_logger


__all__ = [
    "setup_logging",
    "get_logger",
    "setup_access_logging",
    "ACCESS_LOGGER_NAME",
    "LOG_DIR",
    "PLATFORM_LOG_DIR",
]
