# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 数据恢复模块
逐块尝试修复损坏块：成功则恢复为已分配，失败则释放并从所属文件中移除
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config import RECOVER_SEEK_TIME, RECOVER_TRANSFER_TIME, RECOVERY_PROBABILITY
from ..logger import get_logger
from .access_log import AccessLog, AccessLogEntry, AccessOperation
from .disk import BlockStatus, VirtualDisk
from .filesystem import FileSystem

logger = get_logger('recovery')

UNKNOWN = 'unknown'


@dataclass
class RecoveryResult:
    """恢复结果"""
    recovered: List[int] = field(default_factory=list)
    lost: List[int] = field(default_factory=list)
    files_affected: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'recovered': list(self.recovered),
            'lost': list(self.lost),
            'files_affected': list(self.files_affected)
        }


def _log_recovery(access_log: AccessLog, file_id: str, file_name: str,
                  block_id: int, success: bool):
    access_log.append(AccessLogEntry(
        operation=AccessOperation.RECOVER,
        file_id=file_id,
        file_name=file_name,
        blocks=[block_id],
        seek_time=RECOVER_SEEK_TIME,
        transfer_time=RECOVER_TRANSFER_TIME,
        total_time=RECOVER_SEEK_TIME + RECOVER_TRANSFER_TIME,
        success=success
    ))


def recover_corrupted_blocks(disk: VirtualDisk, filesystem: FileSystem, access_log: AccessLog,
                             rng: random.Random,
                             probability: float = RECOVERY_PROBABILITY) -> RecoveryResult:
    """
    恢复所有损坏块

    每个损坏块独立以probability的概率恢复；
    恢复失败的块被释放，并从所属文件的块列表中移除，
    因此调用结束后不会有文件引用空闲块
    """
    result = RecoveryResult()

    for block in disk.blocks:
        if block.status != BlockStatus.CORRUPTED:
            continue

        owner_id = block.owner_file_id
        owner = filesystem.get_file(owner_id) if owner_id else None
        if owner_id and owner_id not in result.files_affected:
            result.files_affected.append(owner_id)
        file_name = owner.name if owner else UNKNOWN

        if rng.random() < probability:
            block.status = BlockStatus.USED
            result.recovered.append(block.id)
            _log_recovery(access_log, owner_id or UNKNOWN, file_name, block.id, True)
        else:
            block.clear()
            result.lost.append(block.id)
            if owner is not None:
                owner.blocks = [b for b in owner.blocks if b != block.id]
                owner.size_bytes = len(owner.blocks) * disk.block_size
            _log_recovery(access_log, owner_id or UNKNOWN, file_name, block.id, False)

    if result.recovered or result.lost:
        logger.info("恢复完成: 恢复 %d 块，丢失 %d 块，涉及 %d 个文件",
                    len(result.recovered), len(result.lost), len(result.files_affected))
    return result
