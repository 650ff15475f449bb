"""Result handling utilities for handshake runs.

Provides functions for saving, loading, and summarizing handshake results
in JSON and CSV formats.

Notes
-----
Results are stored with timestamps and scenario metadata for traceability.
Session keys are never written; a run only records whether both sides
derived the same key.
"""

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from srp_pake.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RunResult:
    """Result from a single handshake.

    Attributes
    ----------
    run_id : int
        Index of this run within the scenario.
    success : bool
        Whether both sides reached AUTHENTICATED.
    group : str
        Group name used for the run.
    digest : str
        Digest name used for the run.
    keys_match : Optional[bool]
        Whether client and server keys match (None if no key was released).
    error_message : Optional[str]
        Error message if the handshake failed.
    error_type : Optional[str]
        Exception class name if the handshake failed.
    duration_ms : float
        Execution time in milliseconds.
    expected_success : bool
        Whether the scenario expects the handshake to succeed.
    """

    run_id: int
    success: bool
    group: str = ""
    digest: str = ""
    keys_match: Optional[bool] = None
    error_message: Optional[str] = None
    error_type: Optional[str] = None
    duration_ms: float = 0.0
    expected_success: bool = True

    @property
    def as_expected(self) -> bool:
        """True if the outcome matches what the scenario expects."""
        return self.success == self.expected_success


@dataclass
class ScenarioResult:
    """Aggregated results from a scenario execution.

    Attributes
    ----------
    scenario_name : str
        Name of the scenario.
    timestamp : str
        ISO timestamp when the scenario was executed.
    config : Dict[str, Any]
        Configuration used for the scenario.
    runs : List[RunResult]
        Results from individual runs.
    summary : Dict[str, Any]
        Computed summary statistics.
    """

    scenario_name: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    config: Dict[str, Any] = field(default_factory=dict)
    runs: List[RunResult] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    def compute_summary(self) -> Dict[str, Any]:
        """Compute summary statistics from runs.

        Returns
        -------
        Dict[str, Any]
            Success rate, duration statistics and error distribution.
        """
        if not self.runs:
            return {}

        successful_runs = [r for r in self.runs if r.success]
        failed_runs = [r for r in self.runs if not r.success]
        durations = np.array([r.duration_ms for r in self.runs], dtype=float)

        summary = {
            "total_runs": len(self.runs),
            "successful_runs": len(successful_runs),
            "failed_runs": len(failed_runs),
            "success_rate": len(successful_runs) / len(self.runs),
            "as_expected_rate": sum(1 for r in self.runs if r.as_expected) / len(self.runs),
            "avg_duration_ms": float(np.mean(durations)),
            "std_duration_ms": float(np.std(durations)),
            "min_duration_ms": float(np.min(durations)),
            "max_duration_ms": float(np.max(durations)),
            "median_duration_ms": float(np.median(durations)),
        }

        if successful_runs:
            summary["keys_match_rate"] = (
                sum(1 for r in successful_runs if r.keys_match) / len(successful_runs)
            )

        if failed_runs:
            error_counts: Dict[str, int] = {}
            for r in failed_runs:
                err = r.error_type or "Unknown"
                error_counts[err] = error_counts.get(err, 0) + 1
            summary["error_distribution"] = error_counts

        self.summary = summary
        return summary


def save_results_json(
    results: Union[ScenarioResult, List[ScenarioResult]],
    output_path: Union[str, Path],
) -> Path:
    """Save results to JSON file.

    Parameters
    ----------
    results : Union[ScenarioResult, List[ScenarioResult]]
        Results to save.
    output_path : Union[str, Path]
        Output file path (will add .json extension if missing).

    Returns
    -------
    Path
        Path to the saved file.
    """
    output_path = Path(output_path)
    if output_path.suffix != ".json":
        output_path = output_path.with_suffix(".json")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(results, ScenarioResult):
        results = [results]

    data = []
    for result in results:
        data.append({
            "scenario_name": result.scenario_name,
            "timestamp": result.timestamp,
            "config": result.config,
            "runs": [asdict(run) for run in result.runs],
            "summary": result.summary,
        })

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)

    logger.info(f"Saved results to {output_path}")
    return output_path


def save_results_csv(
    results: Union[ScenarioResult, List[ScenarioResult]],
    output_path: Union[str, Path],
) -> Path:
    """Save results to CSV file (one row per run).

    Parameters
    ----------
    results : Union[ScenarioResult, List[ScenarioResult]]
        Results to save.
    output_path : Union[str, Path]
        Output file path (will add .csv extension if missing).

    Returns
    -------
    Path
        Path to the saved file.
    """
    output_path = Path(output_path)
    if output_path.suffix != ".csv":
        output_path = output_path.with_suffix(".csv")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(results, ScenarioResult):
        results = [results]

    rows = []
    for scenario in results:
        for run in scenario.runs:
            row = {"scenario": scenario.scenario_name, "timestamp": scenario.timestamp}
            row.update(asdict(run))
            rows.append(row)

    if not rows:
        logger.warning("No results to save")
        return output_path

    fieldnames = list(rows[0].keys())
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)

    logger.info(f"Saved results to {output_path}")
    return output_path


def load_results_json(input_path: Union[str, Path]) -> List[ScenarioResult]:
    """Load results from JSON file.

    Parameters
    ----------
    input_path : Union[str, Path]
        Path to JSON file.

    Returns
    -------
    List[ScenarioResult]
        Loaded results.
    """
    with open(Path(input_path), "r") as f:
        data = json.load(f)

    results = []
    for item in data:
        runs = [RunResult(**run) for run in item.get("runs", [])]
        results.append(ScenarioResult(
            scenario_name=item["scenario_name"],
            timestamp=item.get("timestamp", ""),
            config=item.get("config", {}),
            runs=runs,
            summary=item.get("summary", {}),
        ))

    return results


def load_results_csv(input_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load results from CSV file as row dictionaries (values are strings)."""
    with open(Path(input_path), "r", newline="") as f:
        return list(csv.DictReader(f))


def generate_result_filename(scenario_name: str, extension: str = "json") -> str:
    """Generate a timestamped filename for results.

    Parameters
    ----------
    scenario_name : str
        Name of the scenario.
    extension : str
        File extension (without dot).

    Returns
    -------
    str
        Generated filename.
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{scenario_name}_{timestamp}.{extension}"


def generate_summary_report(
    results: List[ScenarioResult],
    output_path: Optional[Union[str, Path]] = None,
) -> str:
    """Generate a text summary report of results.

    Parameters
    ----------
    results : List[ScenarioResult]
        Results to summarize.
    output_path : Optional[Union[str, Path]]
        If provided, save report to this path.

    Returns
    -------
    str
        The generated report text.
    """
    lines = []
    lines.append("=" * 70)
    lines.append("SRP HANDSHAKE RESULTS SUMMARY")
    lines.append("=" * 70)
    lines.append(f"Generated: {datetime.now().isoformat()}")
    lines.append(f"Total scenarios: {len(results)}")
    lines.append("")

    for scenario in results:
        lines.append("-" * 70)
        lines.append(f"Scenario: {scenario.scenario_name}")
        lines.append(f"Timestamp: {scenario.timestamp}")
        lines.append("")

        if scenario.summary:
            s = scenario.summary
            lines.append(f"  Total runs:      {s.get('total_runs', 0)}")
            lines.append(f"  Successful:      {s.get('successful_runs', 0)}")
            lines.append(f"  Failed:          {s.get('failed_runs', 0)}")
            lines.append(f"  Success rate:    {s.get('success_rate', 0) * 100:.1f}%")
            lines.append(f"  As expected:     {s.get('as_expected_rate', 0) * 100:.1f}%")
            lines.append("")

            if s.get("avg_duration_ms") is not None:
                lines.append(
                    f"  Duration ms (avg±std): {s['avg_duration_ms']:.2f} ± {s.get('std_duration_ms', 0):.2f}"
                )
                lines.append(
                    f"  Duration ms (range):   [{s.get('min_duration_ms', 0):.2f}, {s.get('max_duration_ms', 0):.2f}]"
                )

            if s.get("error_distribution"):
                lines.append("  Errors:")
                for err, count in s["error_distribution"].items():
                    lines.append(f"    - {err}: {count}")
        else:
            lines.append("  No summary available")

        lines.append("")

    lines.append("=" * 70)

    report = "\n".join(lines)

    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(report)
        logger.info(f"Saved report to {output_path}")

    return report
