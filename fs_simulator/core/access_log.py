# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 访问日志模块
只追加的操作历史，并实现寻道/传输时间模型
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..config import SEEK_COST_PER_BLOCK, SINGLE_BLOCK_SEEK, TRANSFER_COST_PER_BLOCK


class AccessOperation(Enum):
    """日志操作类型"""
    READ = 'read'
    WRITE = 'write'
    DELETE = 'delete'
    CREATE = 'create'
    RECOVER = 'recover'


def calculate_seek_time(block_ids: Sequence[int]) -> float:
    """
    寻道时间：0或1个块为固定代价；
    否则为相邻块号距离之和 × 0.1，保留一位小数
    """
    if len(block_ids) <= 1:
        return SINGLE_BLOCK_SEEK
    distance = sum(abs(block_ids[i] - block_ids[i - 1]) for i in range(1, len(block_ids)))
    return round(distance * SEEK_COST_PER_BLOCK, 1)


def calculate_transfer_time(block_ids: Sequence[int]) -> float:
    """传输时间：块数 × 0.5"""
    return len(block_ids) * TRANSFER_COST_PER_BLOCK


@dataclass
class AccessLogEntry:
    """访问日志条目"""
    operation: AccessOperation
    file_id: str
    file_name: str
    blocks: List[int]
    seek_time: float
    transfer_time: float
    total_time: float
    success: bool = True
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'operation': self.operation.value,
            'file_id': self.file_id,
            'file_name': self.file_name,
            'blocks': list(self.blocks),
            'seek_time': self.seek_time,
            'transfer_time': self.transfer_time,
            'total_time': self.total_time,
            'success': self.success
        }


class AccessLog:
    """访问日志（按插入顺序保存，只追加）"""

    def __init__(self):
        self._entries: List[AccessLogEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def append(self, entry: AccessLogEntry) -> AccessLogEntry:
        self._entries.append(entry)
        return entry

    def record(self, operation: AccessOperation, file_id: str, file_name: str,
               blocks: Sequence[int], success: bool = True,
               transfer_blocks: Optional[int] = None) -> AccessLogEntry:
        """按时间模型计算代价并追加一条日志；transfer_blocks 指定计入传输的块数"""
        seek_time = calculate_seek_time(blocks)
        if transfer_blocks is None:
            transfer_time = calculate_transfer_time(blocks)
        else:
            transfer_time = transfer_blocks * TRANSFER_COST_PER_BLOCK
        return self.append(AccessLogEntry(
            operation=operation,
            file_id=file_id,
            file_name=file_name,
            blocks=list(blocks),
            seek_time=seek_time,
            transfer_time=transfer_time,
            total_time=seek_time + transfer_time,
            success=success
        ))

    def entries(self) -> List[AccessLogEntry]:
        """全部日志的副本"""
        return list(self._entries)

    def recent(self, count: int) -> List[AccessLogEntry]:
        """最近count条日志，最新的在前"""
        if count <= 0:
            return []
        return list(reversed(self._entries[-count:]))

    def average_seek_time(self) -> float:
        if not self._entries:
            return 0
        return round_half_up(sum(e.seek_time for e in self._entries) / len(self._entries), 2)

    def average_transfer_time(self) -> float:
        if not self._entries:
            return 0
        return round_half_up(sum(e.transfer_time for e in self._entries) / len(self._entries), 2)


def round_half_up(value: float, digits: int = 0) -> float:
    """四舍五入（内置round为银行家舍入）"""
    factor = 10 ** digits
    return int(value * factor + 0.5) / factor if value >= 0 else -round_half_up(-value, digits)
