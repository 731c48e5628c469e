# -*- coding: utf-8 -*-
"""
文件系统原理模拟器
在内存中模拟盘块管理、文件分配、崩溃恢复与碎片整理
"""

from .core import FileSystemSimulator

__version__ = '1.0.0'

__all__ = ['FileSystemSimulator']
