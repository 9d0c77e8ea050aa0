import pytest
import pandas as pd
from pathlib import Path
from cachesim.utils.viz import export_miss_rate_ascii, export_miss_rate_timeline, export_sweep_chart


@pytest.fixture
def sample_timeline():
    """Provides a sample miss-rate timeline for testing."""
    return [
        {'order': 99, 'accesses': 100, 'misses': 80, 'miss_rate': 0.8, 'total_time': 6580},
        {'order': 199, 'accesses': 200, 'misses': 90, 'miss_rate': 0.45, 'total_time': 7400},
        {'order': 249, 'accesses': 250, 'misses': 95, 'miss_rate': 0.38, 'total_time': 7855},
    ]


class TestExportMissRateHTML:
    def test_export_empty_timeline(self, tmp_path: Path):
        """Tests that an HTML file is created for an empty timeline."""
        # given
        output_path = tmp_path / "timeline.html"

        # when
        export_miss_rate_timeline([], str(output_path))

        # then
        assert output_path.exists()
        assert "No data to display" in output_path.read_text()

    def test_export_with_data(self, tmp_path: Path, sample_timeline):
        """Tests that a valid HTML file is created for a sample timeline."""
        # given
        output_path = tmp_path / "timeline.html"

        # when
        export_miss_rate_timeline(sample_timeline, str(output_path), title="Test Miss Rate")

        # then
        content = output_path.read_text()
        assert "Test Miss Rate" in content
        assert "cdn.plot.ly" in content

    def test_export_sweep_chart(self, tmp_path: Path):
        df = pd.DataFrame({'size_kb': [1, 2, 1, 2], 'associativity': [1, 1, 2, 2],
                           'total_misses': [5, 3, 4, 2], 'total_time': [1, 1, 1, 1],
                           'miss_rate': [0.5, 0.3, 0.4, 0.2]})
        output_path = tmp_path / "sweep.html"
        export_sweep_chart(df, str(output_path))
        content = output_path.read_text()
        assert "Miss Rate vs Cache Size" in content
        assert "2-way" in content

    def test_export_sweep_chart_empty(self, tmp_path: Path):
        output_path = tmp_path / "sweep.html"
        export_sweep_chart(pd.DataFrame(), str(output_path))
        assert "No data to display" in output_path.read_text()


class TestExportMissRateASCII:
    def test_ascii_empty_timeline(self):
        assert "Timeline is empty" in export_miss_rate_ascii([])

    def test_ascii_with_data(self, sample_timeline):
        chart = export_miss_rate_ascii(sample_timeline)
        assert "Cumulative Miss Rate (ASCII)" in chart
        assert "order 0 .. 249" in chart
        assert "100%" in chart
        lines = chart.splitlines()
        # First column (0.8) reaches higher than the last (0.38)
        bars = [line.split("|", 1)[1] for line in lines if "|" in line]
        assert sum(row[0] == '#' for row in bars) > sum(row[2] == '#' for row in bars)

    def test_ascii_downsamples_wide_timelines(self):
        timeline = [{'order': i, 'miss_rate': 0.5} for i in range(500)]
        chart = export_miss_rate_ascii(timeline, width=40)
        bars = [line.split("|", 1)[1] for line in chart.splitlines() if "|" in line]
        assert all(len(row) == 40 for row in bars)
