# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 一致性检查模块 (fsck)
交叉校验盘块状态与文件块引用，只读不修改
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from ..logger import get_logger
from .disk import BlockStatus, VirtualDisk
from .filesystem import FileSystem

logger = get_logger('fsck')


@dataclass
class FsckReport:
    """一致性检查结果"""
    orphan_blocks: List[int] = field(default_factory=list)       # 已分配但无文件引用
    missing_blocks: List[int] = field(default_factory=list)      # 被引用但状态为空闲
    inconsistent_files: List[str] = field(default_factory=list)  # 正反向引用不一致

    @property
    def is_consistent(self) -> bool:
        return not (self.orphan_blocks or self.missing_blocks or self.inconsistent_files)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'orphan_blocks': list(self.orphan_blocks),
            'missing_blocks': list(self.missing_blocks),
            'inconsistent_files': list(self.inconsistent_files),
            'consistent': self.is_consistent
        }


def run_fsck(disk: VirtualDisk, filesystem: FileSystem) -> FsckReport:
    """执行一致性检查"""
    report = FsckReport()
    referenced: Set[int] = set()

    for entry in filesystem.list_files():
        for block_id in entry.blocks:
            referenced.add(block_id)
            block = disk.get_block(block_id)
            broken = (
                block is None
                or block.status == BlockStatus.CORRUPTED
                or block.owner_file_id != entry.id
            )
            if broken and entry.id not in report.inconsistent_files:
                report.inconsistent_files.append(entry.id)

    report.orphan_blocks = [
        b.id for b in disk.blocks if b.status == BlockStatus.USED and b.id not in referenced
    ]
    report.missing_blocks = sorted(
        b for b in referenced if disk.is_valid_block(b) and disk.blocks[b].status == BlockStatus.FREE
    )

    if not report.is_consistent:
        logger.warning("fsck发现问题: 孤立块 %d，丢失块 %d，不一致文件 %d",
                       len(report.orphan_blocks), len(report.missing_blocks),
                       len(report.inconsistent_files))
    return report
