# -*- coding: utf-8 -*-
"""
统计信息、示例数据与性能对比测试
"""

import pytest

from fs_simulator.core import FileSystemSimulator, benchmark_allocation_methods


def test_empty_stats(sim):
    """测试: 空磁盘统计"""
    stats = sim.get_stats()
    assert stats.to_dict() == {
        'total_blocks': 256,
        'used_blocks': 0,
        'free_blocks': 252,
        'corrupted_blocks': 0,
        'fragmentation_percent': 0,
        'avg_seek_time': 0,
        'avg_transfer_time': 0
    }


def test_average_times_over_whole_log(sim):
    """测试: 平均时间基于全部访问日志"""
    entry = sim.create_file('a.txt', 5)
    sim.read_file(entry.id)
    stats = sim.get_stats()
    assert stats.avg_seek_time == pytest.approx(0.4)
    assert stats.avg_transfer_time == pytest.approx(2.5)

    sim.delete_file(entry.id)
    stats = sim.get_stats()
    assert stats.avg_seek_time == pytest.approx(0.27)
    assert stats.avg_transfer_time == pytest.approx(1.67)


def test_fragmentation_rounds_half_up(sim):
    """测试: 碎片率四舍五入（1/8 = 12.5% -> 13%）"""
    first = sim.create_file('first.dat', 1)
    sim.create_file('second.dat', 1)
    sim.delete_file(first.id)
    big = sim.create_file('big.dat', 9, method='linked')

    assert big.blocks == [4] + list(range(6, 14))
    assert sim.get_stats().fragmentation_percent == 13


def test_corrupted_blocks_counted(sim):
    sim.create_file('a.txt', 10)
    sim.simulate_crash(0.3)
    stats = sim.get_stats()
    assert stats.corrupted_blocks == 3
    assert stats.used_blocks == 7
    assert stats.free_blocks == 242


def test_fragmented_files_report(sim):
    """测试: 碎片文件按间隔数降序排列"""
    files = [sim.create_file(f'f{i}.dat', 1) for i in range(8)]
    for entry in files[0::2]:
        sim.delete_file(entry.id)
    one_gap = sim.create_file('one.dat', 2, method='linked')
    two_gaps = sim.create_file('two.dat', 3, method='linked')
    sim.create_file('plain.dat', 3)

    assert one_gap.blocks == [4, 6]
    assert two_gaps.blocks == [8, 10, 12]
    report = sim.get_fragmented_files()
    assert [item['name'] for item in report] == ['two.dat', 'one.dat']
    assert [item['gaps'] for item in report] == [2, 1]


def test_sample_filesystem(check_invariants):
    """测试: 示例文件系统"""
    sim = FileSystemSimulator(seed=3)
    sim.generate_sample_filesystem()

    tree = sim.get_directory_tree()
    assert [d.name for d in tree.children] == ['Documents', 'Images', 'System', 'Logs']
    assert [d.id for d in tree.children] == ['dir_2', 'dir_3', 'dir_4', 'dir_5']
    assert sim.get_file('file_6').name == 'report.pdf'
    names = {f.name for f in sim.filesystem.regular_files()}
    assert 'notes.txt' not in names
    assert 'photo1.jpg' not in names
    assert {'resume.pdf', 'budget.xlsx', 'kernel.bin'} <= names
    assert len(names) == 13
    assert sim.get_stats().fragmentation_percent > 0
    assert sim.run_fsck().is_consistent
    check_invariants(sim)


def test_benchmark_allocation_methods():
    """测试: 三种分配方式的性能对比"""
    results = benchmark_allocation_methods(seed=5)

    assert [r['method'] for r in results] == ['contiguous', 'linked', 'indexed']
    for r in results:
        assert r['avg_seek_time'] > 0
        assert r['avg_transfer_time'] > 0
        assert r['total_time'] == pytest.approx(r['avg_seek_time'] + r['avg_transfer_time'])
        assert 0 <= r['fragmentation'] <= 100
    assert results[0]['fragmentation'] == 0
    assert benchmark_allocation_methods(seed=5) == results
