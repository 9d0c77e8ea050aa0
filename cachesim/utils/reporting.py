from __future__ import annotations
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import pandas as pd

from ..cache.cache_config import CacheGeometry
from ..cache.stats import CacheSummary
from ..trace.record import AccessRecord
from . import viz

if TYPE_CHECKING:
    from ..config import SimConfig
    from ..runtime.simulator import SimulationResult


def format_verbose_line(record: AccessRecord) -> str:
    """
    One line per access: order (decimal); index, tag, prior valid, block id,
    last used, tag (0 if the slot was empty), dirty and hit flag (hex);
    then the case code.
    """
    prior = record.prior
    prior_tag = prior.tag if prior.valid else 0
    fields = [
        record.index,
        record.tag,
        int(prior.valid),
        prior.block_id,
        prior.last_used,
        prior_tag,
        int(prior.dirty),
        int(record.hit),
    ]
    return f"{record.order} " + " ".join(f"{v:x}" for v in fields) + f" {record.case_code}"


def format_summary(summary: CacheSummary, geometry: CacheGeometry) -> str:
    s = summary.statistics
    if summary.has_accesses:
        miss_rate = f"miss rate {summary.miss_rate:g}"
    else:
        miss_rate = "miss rate n/a (no accesses)"
    lines = [
        geometry.label,
        f"loads {s.reads} stores {s.writes} total {summary.total_accesses}",
        f"rmiss {s.read_misses} wmiss {s.write_misses} total {summary.total_misses}",
        f"dirty rmiss {s.dirty_read_misses} dirty wmiss {s.dirty_write_misses}",
        f"bytes read {s.bytes_read} bytes written {s.bytes_written}",
        f"read time {s.read_access_time} write time {s.write_access_time}",
        f"total time {summary.total_time}",
        miss_rate,
    ]
    return "\n".join(lines)


def generate_report_json(result: SimulationResult, config: SimConfig) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from a simulation result."""
    return {
        "geometry": result.geometry.to_dict(),
        "statistics": result.summary.statistics.to_dict(),
        "summary": {
            "total_accesses": result.summary.total_accesses,
            "total_misses": result.summary.total_misses,
            "total_time": result.summary.total_time,
            "miss_rate": result.summary.miss_rate,
        },
        "timeline": result.timeline,
        "config": dict(config.__dict__),
    }


def generate_report(result: SimulationResult, config: SimConfig):
    """Prints the summary and writes report artifacts when a report dir is set."""
    print(format_summary(result.summary, result.geometry))
    print()
    print(viz.export_miss_rate_ascii(result.timeline))

    if not config.report_dir:
        return

    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report_data = generate_report_json(result, config)
    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)
    viz.export_miss_rate_timeline(result.timeline, str(output_dir / "report.html"),
                                  title=f"Cumulative Miss Rate ({result.geometry.label})")
    print(f"\nReports generated in {output_dir.absolute()}")


def generate_sweep_report(df: pd.DataFrame, config: SimConfig):
    """Prints the sweep table and writes sweep.csv / sweep.html when a report dir is set."""
    if df.empty:
        print("No valid configurations to report.")
    else:
        print(df[["size_kb", "associativity", "total_accesses", "total_misses",
                  "total_time", "miss_rate"]].to_string(index=False))

    if not config.report_dir:
        return

    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_dir / "sweep.csv", index=False)
    viz.export_sweep_chart(df, str(output_dir / "sweep.html"))
    print(f"\nReports generated in {output_dir.absolute()}")
