# -*- coding: utf-8 -*-
"""
一致性检查与碎片整理测试
"""

import pytest

from fs_simulator.core import BlockMove, BlockStatus, FileSystemSimulator


def _interleaved(sim):
    """
    创建5个2块文件，删除第2、4个制造空洞，再用链接分配创建一个5块文件：
    f0=[4,5] big=[6,7,10,11,14] f2=[8,9] f4=[12,13]
    """
    files = [sim.create_file(f'f{i}.dat', 2) for i in range(5)]
    sim.delete_file(files[1].id)
    sim.delete_file(files[3].id)
    big = sim.create_file('big.dat', 5, method='linked')
    return files[0], big, files[2], files[4]


def test_fsck_clean_disk(sim):
    """测试: 正常磁盘一致"""
    sim.create_file('a.txt', 3)
    sim.create_directory('docs')
    report = sim.run_fsck()
    assert report.is_consistent
    assert report.to_dict()['consistent'] is True


def test_fsck_reports_corrupted_files(sim):
    """测试: 含损坏块的文件不一致"""
    a = sim.create_file('a.txt', 3)
    b = sim.create_file('b.txt', 3)
    sim.disk.blocks[a.blocks[0]].status = BlockStatus.CORRUPTED
    sim.disk.blocks[a.blocks[2]].status = BlockStatus.CORRUPTED

    report = sim.run_fsck()
    assert report.inconsistent_files == [a.id]
    assert b.id not in report.inconsistent_files
    assert report.orphan_blocks == []
    assert report.missing_blocks == []


def test_fsck_reports_orphan_blocks(sim):
    """测试: 已分配但没有文件引用的块为孤立块"""
    sim.create_file('a.txt', 2)
    sim.disk.mark_used(50, 'ghost', '[ghost:50]')

    report = sim.run_fsck()
    assert report.orphan_blocks == [50]
    assert not report.is_consistent


def test_fsck_reports_missing_blocks(sim):
    """测试: 文件引用的块状态为空闲"""
    a = sim.create_file('a.txt', 3)
    sim.disk.blocks[a.blocks[1]].clear()

    report = sim.run_fsck()
    assert report.missing_blocks == [a.blocks[1]]
    assert report.inconsistent_files == [a.id]


def test_fsck_reports_owner_mismatch(sim):
    a = sim.create_file('a.txt', 2)
    b = sim.create_file('b.txt', 2)
    sim.disk.blocks[a.blocks[0]].owner_file_id = b.id

    assert sim.run_fsck().inconsistent_files == [a.id]


def test_fsck_is_read_only(sim):
    sim.create_file('a.txt', 4)
    sim.simulate_crash(0.5)
    before = sim.disk.get_block_map()
    log_count = len(sim.access_log)

    sim.run_fsck()
    assert sim.disk.get_block_map() == before
    assert len(sim.access_log) == log_count


def test_defragment_interleaved_files(sim, check_invariants):
    """测试: 碎片整理后碎片率为0，文件按原首块顺序连续排列"""
    f0, big, f2, f4 = _interleaved(sim)
    assert big.blocks == [6, 7, 10, 11, 14]
    assert sim.get_stats().fragmentation_percent > 0
    used_before = sim.get_stats().used_blocks

    result = sim.defragment()

    assert f0.blocks == [4, 5]
    assert big.blocks == [6, 7, 8, 9, 10]
    assert f2.blocks == [11, 12]
    assert f4.blocks == [13, 14]
    assert result.moves == [
        BlockMove(10, 8), BlockMove(11, 9), BlockMove(14, 10),
        BlockMove(8, 11), BlockMove(9, 12), BlockMove(12, 13), BlockMove(13, 14)
    ]
    assert all(m.from_block != m.to_block for m in result.moves)
    assert result.time_saved == pytest.approx(len(result.moves) * 0.8)

    stats = sim.get_stats()
    assert stats.fragmentation_percent == 0
    assert stats.used_blocks == used_before
    assert sim.run_fsck().is_consistent
    check_invariants(sim)


def test_defragment_preserves_block_content(sim):
    """测试: 块内容随块移动，不丢失"""
    _, big, _, _ = _interleaved(sim)
    labels = [sim.disk.blocks[b].label for b in big.blocks]

    sim.defragment()

    assert [sim.disk.blocks[b].label for b in big.blocks] == labels
    assert all(sim.disk.blocks[b].owner_file_id == big.id for b in big.blocks)


def test_defragment_keeps_corruption(sim, check_invariants):
    """测试: 损坏块随文件移动并保持损坏状态"""
    _interleaved(sim)
    corrupted = sim.simulate_crash(0.3)

    sim.defragment()

    assert sim.disk.count_status(BlockStatus.CORRUPTED) == len(corrupted)
    assert sorted(sim.run_fsck().inconsistent_files) == sorted(
        {sim.disk.blocks[b].owner_file_id for b in sim.disk.blocks_with_status(BlockStatus.CORRUPTED)}
    )
    check_invariants(sim)


def test_defragment_compacts_free_space(sim):
    """测试: 整理后空闲空间为一段连续区域"""
    _interleaved(sim)
    sim.defragment()
    runs = sim.get_counting_free_list()
    assert len(runs) == 1
    assert runs[0].start == 15


def test_defragment_is_idempotent(sim):
    _interleaved(sim)
    sim.defragment()
    second = sim.defragment()
    assert second.moves == []
    assert second.time_saved == 0


def test_defragment_after_recovery_is_consistent():
    """测试: 崩溃恢复后碎片整理，fsck无问题"""
    sim = FileSystemSimulator(seed=11)
    sim.generate_sample_filesystem()
    sim.simulate_crash(0.4)
    sim.recover_corrupted_blocks()

    sim.defragment()

    report = sim.run_fsck()
    assert report.is_consistent
    assert sim.get_stats().fragmentation_percent == 0


def test_defragment_leaves_directories_alone(sim):
    docs = sim.create_directory('docs')
    sim.create_file('a.txt', 2, docs.id)
    sim.defragment()
    assert docs.blocks == []
    assert len(docs.children) == 1
