# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 磁盘崩溃模拟模块
随机将一部分已分配块标记为损坏
"""

import math
import random
from typing import List

from ..config import DEFAULT_CRASH_SEVERITY
from ..logger import get_logger
from .disk import BlockStatus, VirtualDisk

logger = get_logger('crash')


def simulate_crash(disk: VirtualDisk, rng: random.Random,
                   severity: float = DEFAULT_CRASH_SEVERITY) -> List[int]:
    """
    模拟磁盘崩溃

    Args:
        disk: 虚拟磁盘
        rng: 模拟器持有的随机数生成器
        severity: 严重程度，取值 (0, 1]

    Returns:
        被损坏的块号（按选中顺序）；无已分配块或严重程度无效时返回空列表
    """
    if not 0 < severity <= 1:
        return []

    used_blocks = disk.blocks_with_status(BlockStatus.USED)
    if not used_blocks:
        return []

    count = max(1, math.floor(len(used_blocks) * severity))
    corrupted = rng.sample(used_blocks, count)
    for block_id in corrupted:
        # 所属关系保持不变
        disk.blocks[block_id].status = BlockStatus.CORRUPTED

    logger.info("模拟崩溃: 严重程度 %.2f，损坏 %d/%d 个块", severity, count, len(used_blocks))
    return corrupted
