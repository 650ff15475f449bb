#!/usr/bin/env python3
"""Run SRP handshake scenarios from configuration files.

This script provides batch execution of in-process client/server
handshakes with different configurations, collecting and saving results
for analysis.

Usage:
    python run_scenarios.py                             # Run all scenarios
    python run_scenarios.py --scenario wrong_password   # Run specific scenario
    python run_scenarios.py --list                      # List available scenarios

Examples:
    # Run all scenarios with default settings
    python run_scenarios.py

    # Run specific scenario with verbose output
    python run_scenarios.py --scenario large_group --log-level DEBUG

    # Run with custom output directory
    python run_scenarios.py --output-dir ./my_results

Reference:
- configs/scenarios/*.yaml
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from srp_pake.arithmetic.modular import constant_time_equal
from srp_pake.configs import engine_settings, list_scenarios, load_scenario
from srp_pake.core.exceptions import SrpError
from srp_pake.groups.catalog import lookup
from srp_pake.kdf.derivation import PasswordHasher, ScryptPasswordHasher
from srp_pake.kdf.records import create_user_record
from srp_pake.protocol.client import ClientSession
from srp_pake.protocol.server import ServerSession
from srp_pake.utils.logging import get_logger, set_log_level
from srp_pake.utils.results import (
    RunResult,
    ScenarioResult,
    generate_summary_report,
    save_results_csv,
    save_results_json,
)

logger = get_logger(__name__)

RESULTS_DIR = Path(__file__).parent.parent / "results"

TAMPER_TARGETS = ("none", "A", "B", "M1", "M2")


def _flip_first_bit(data: bytes) -> bytes:
    return bytes([data[0] ^ 0x01]) + data[1:]


def _password_hasher(name: str) -> Optional[PasswordHasher]:
    if name == "scrypt":
        return ScryptPasswordHasher()
    if name == "rfc5054":
        return None
    raise ValueError(f"Unknown password hasher: {name}")


def run_handshake(config: Dict[str, Any], run_id: int = 0) -> RunResult:
    """Run one client/server handshake in-process.

    Parameters
    ----------
    config : Dict[str, Any]
        Merged scenario configuration (``engine`` and ``run`` sections).
    run_id : int
        Index of this run within the scenario.

    Returns
    -------
    RunResult
        Outcome of the handshake. Protocol errors are recorded, not raised.

    Raises
    ------
    ValueError
        If the scenario requests an unknown tamper target or hasher.

    Notes
    -----
    Tampering with A or B replaces the value with zero, which both sides
    must reject. Tampering with M1 or M2 flips one bit of the proof.
    """
    settings = engine_settings(config)
    run_config = config.get("run", {})
    identity = run_config.get("identity", "alice")
    password = run_config.get("password", "correcthorse")
    login_password = run_config.get("login_password") or password
    tamper = str(run_config.get("tamper", "none"))
    if tamper not in TAMPER_TARGETS:
        raise ValueError(f"Unknown tamper target: {tamper}")
    hasher = _password_hasher(run_config.get("password_hasher", "rfc5054"))

    group = lookup(settings.group)
    record = create_user_record(
        identity,
        password,
        group,
        digest=settings.digest,
        hasher=hasher,
        salt_bytes=settings.salt_bytes,
    )

    result = RunResult(
        run_id=run_id,
        success=False,
        group=group.name,
        digest=settings.digest,
        expected_success=tamper == "none" and login_password == password,
    )

    client = None
    server = None
    start_time = time.perf_counter()
    try:
        client, A = ClientSession.start(
            identity,
            login_password,
            group,
            digest=settings.digest,
            hasher=hasher,
            private_bits=settings.private_bits,
        )
        if tamper == "A":
            A = bytes(len(A))

        server, salt, B = ServerSession.start(
            record, group, A, digest=settings.digest, private_bits=settings.private_bits
        )
        if tamper == "B":
            B = bytes(len(B))

        _, M1 = client.process_challenge(salt, B)
        if tamper == "M1":
            M1 = _flip_first_bit(M1)

        M2, server_key = server.verify_client_proof(M1)
        if tamper == "M2":
            M2 = _flip_first_bit(M2)

        client_key = client.verify_server_proof(M2)
        result.success = True
        result.keys_match = constant_time_equal(client_key, server_key)
    except SrpError as e:
        result.error_type = type(e).__name__
        result.error_message = str(e)
        logger.debug(f"Run {run_id} rejected: {result.error_type}")
    finally:
        result.duration_ms = (time.perf_counter() - start_time) * 1000
        for session in (client, server):
            if session is not None:
                session.close()

    return result


def run_scenario(name: str, log_level: Optional[str] = None) -> ScenarioResult:
    """Load a scenario and run its configured number of handshakes.

    Parameters
    ----------
    name : str
        Scenario name (without .yaml extension).
    log_level : Optional[str]
        Overrides ``engine.log_level`` from the scenario config.

    Returns
    -------
    ScenarioResult
        Results with the summary already computed.
    """
    config = load_scenario(name)
    settings = engine_settings(config)
    set_log_level(log_level or settings.log_level)

    scenario_name = config.get("scenario", {}).get("name", name)
    num_runs = config.get("run", {}).get("num_runs", 5)
    logger.info(f"Running scenario {scenario_name}: {num_runs} handshake(s) on group {settings.group}")

    runs = [run_handshake(config, run_id=i) for i in range(num_runs)]

    scenario_result = ScenarioResult(scenario_name=scenario_name, config=config, runs=runs)
    scenario_result.compute_summary()
    return scenario_result


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Run SRP handshake scenarios",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--scenario", "-s",
        type=str,
        default=None,
        help="Run specific scenario (name without .yaml)",
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List available scenarios",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=str(RESULTS_DIR),
        help=f"Output directory for results (default: {RESULTS_DIR})",
    )
    parser.add_argument(
        "--output-format",
        type=str,
        choices=["json", "csv", "both"],
        default="both",
        help="Output format (default: both)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Don't save results to files",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns
    -------
    int
        Exit code (0 when every scenario behaved as expected).
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    set_log_level(args.log_level)

    if args.list:
        print("Available scenarios:")
        for s in list_scenarios():
            print(f"  - {s}")
        return 0

    scenarios = [args.scenario] if args.scenario else list_scenarios()
    if not scenarios:
        print("No scenarios found!")
        return 1

    all_results: List[ScenarioResult] = []
    for scenario_name in scenarios:
        try:
            result = run_scenario(scenario_name, log_level=args.log_level)
        except (FileNotFoundError, ValueError, SrpError) as e:
            logger.error(f"Failed to run scenario {scenario_name}: {e}")
            continue

        all_results.append(result)
        print(f"\n{scenario_name}:")
        print(f"  Success rate: {result.summary.get('success_rate', 0) * 100:.1f}%")
        print(f"  As expected:  {result.summary.get('as_expected_rate', 0) * 100:.1f}%")
        print(f"  Avg duration: {result.summary.get('avg_duration_ms', 0):.2f} ms")

    if not args.no_save and all_results:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = all_results[0].timestamp.replace(":", "-").replace(".", "-")
        base_filename = f"results_{timestamp}"

        if args.output_format in ("json", "both"):
            save_results_json(all_results, output_dir / f"{base_filename}.json")

        if args.output_format in ("csv", "both"):
            save_results_csv(all_results, output_dir / f"{base_filename}.csv")

        report_path = output_dir / f"{base_filename}_report.txt"
        report = generate_summary_report(all_results, report_path)
        print("\n" + report)

    if len(all_results) != len(scenarios):
        return 1
    unexpected = [r for r in all_results if r.summary.get("as_expected_rate", 0) < 1.0]
    return 1 if unexpected else 0


if __name__ == "__main__":
    sys.exit(main())
