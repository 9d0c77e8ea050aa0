import pytest
from cachesim.config import SimConfig
from cachesim.errors import ParseError
from cachesim.runtime.simulator import SWEEP_COLUMNS, SimulationSession, run, sweep

SCENARIO = [
    "00000000:R 00000000 4",
    "00000000:R 00000010 4",
    "00000000:R 00000000 4",
]


def test_run_direct_mapped_scenario(write_trace, dm_config):
    dm_config.trace_file = str(write_trace(SCENARIO))
    result = run(dm_config, emit=lambda line: None)

    s = result.summary.statistics
    assert s.reads == 3
    assert s.read_misses == 2
    assert s.read_access_time == 163
    assert s.bytes_read == 32
    assert result.summary.total_time == 163
    assert result.summary.miss_rate == pytest.approx(2 / 3)
    assert result.geometry.num_blocks == 64


def test_run_accepts_numbered_lines(dm_config):
    result = run(dm_config, lines=enumerate(SCENARIO, start=1))
    assert result.summary.total_accesses == 3


def test_verbose_lines_only_inside_range(write_trace):
    config = SimConfig(trace_file=str(write_trace(SCENARIO)), verbose=True, verbose_lo=1, verbose_hi=2)
    emitted = []
    run(config, emit=emitted.append)
    assert emitted == [
        "1 1 0 0 0 0 0 0 0 2a",
        "2 0 0 1 0 0 0 0 1 1",
    ]


def test_verbose_off_emits_nothing(dm_config):
    emitted = []
    run(dm_config, lines=enumerate(SCENARIO, start=1), emit=emitted.append)
    assert emitted == []


def test_session_order_and_direct_mapped_sets(dm_config):
    session = SimulationSession(dm_config)
    lines = ["00000000:R %08x 4" % (i * 0x94) for i in range(20)]
    records = [session.step(line) for line in lines]
    assert [r.order for r in records] == list(range(20))
    assert all(r.set_number == r.index for r in records)


def test_session_skips_blank_lines(dm_config):
    session = SimulationSession(dm_config)
    assert session.step("") is None
    assert session.step("00000000:R 00000000 4").order == 0


def test_parse_error_aborts_run(dm_config):
    lines = enumerate(["00000000:R 00000000 4", "not a trace line", "00000000:R 00000000 4"], start=1)
    with pytest.raises(ParseError) as excinfo:
        run(dm_config, lines=lines)
    assert excinfo.value.line_number == 2
    assert excinfo.value.order == 1


def test_missing_trace_file_raises(tmp_path, dm_config):
    dm_config.trace_file = str(tmp_path / "nope.trace")
    with pytest.raises(OSError):
        run(dm_config)


def test_empty_trace(write_trace, dm_config):
    dm_config.trace_file = str(write_trace([]))
    result = run(dm_config)
    assert result.summary.total_accesses == 0
    assert result.summary.miss_rate is None
    assert result.timeline == []


def test_timeline_sampling(dm_config):
    dm_config.timeline_interval = 2
    lines = ["00000000:R %08x 4" % (i * 16) for i in range(5)]
    result = run(dm_config, lines=enumerate(lines, start=1))
    assert [p['order'] for p in result.timeline] == [1, 3, 4]
    assert all(p['miss_rate'] == 1.0 for p in result.timeline)
    assert result.timeline[-1]['accesses'] == 5


def test_sessions_do_not_share_state(dm_config):
    first = run(dm_config, lines=enumerate(SCENARIO, start=1))
    second = run(dm_config, lines=enumerate(SCENARIO, start=1))
    assert first.summary == second.summary


def test_sweep_runs_every_pair(write_trace):
    config = SimConfig(trace_file=str(write_trace(SCENARIO)),
                       sweep_sizes_kb=[1, 2], sweep_associativities=[1, 2])
    df = sweep(config)
    assert list(df.columns) == SWEEP_COLUMNS
    assert len(df) == 4
    assert set(zip(df['size_kb'], df['associativity'])) == {(1, 1), (1, 2), (2, 1), (2, 2)}
    assert (df['total_accesses'] == 3).all()


def test_sweep_skips_invalid_geometry():
    config = SimConfig(sweep_sizes_kb=[1], sweep_associativities=[1, 128])
    df = sweep(config, lines=list(enumerate(SCENARIO, start=1)))
    assert list(df['associativity']) == [1]


def test_sweep_with_no_valid_points():
    config = SimConfig(sweep_sizes_kb=[1], sweep_associativities=[128])
    df = sweep(config, lines=[])
    assert df.empty
    assert list(df.columns) == SWEEP_COLUMNS
