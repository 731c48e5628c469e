# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 日志模块
"""

import logging

from .config import LOG_FILE, LOG_LEVEL

LOGGER_NAME = 'FileSystemSim'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_configured = False


def setup_logging(level: str = None, log_file: str = None) -> logging.Logger:
    """配置模拟器日志（控制台 + 可选日志文件），重复调用只生效一次"""
    global _configured
    logger = logging.getLogger(LOGGER_NAME)
    if _configured:
        return logger

    _configured = True
    logger.setLevel(level or LOG_LEVEL)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    log_file = log_file or LOG_FILE
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """获取模拟器子日志器，例如 FileSystemSim.crash"""
    if name:
        return logging.getLogger(f'{LOGGER_NAME}.{name}')
    return logging.getLogger(LOGGER_NAME)
