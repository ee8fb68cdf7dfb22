from __future__ import annotations

import argparse
import logging
import os
import re
import subprocess
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


from cloudprobe.aws.clients import AwsClients  # noqa: E402
from cloudprobe.config import ProbeConfig  # noqa: E402
from cloudprobe.logging_setup import configure_logging  # noqa: E402


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Utility entrypoint for installing cloudprobe and running its test suites.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "install", help="Install the project and its test extra in editable mode using pip."
    )
    subparsers.add_parser(
        "test", help="Run the unit suite with coverage enabled."
    )
    live_parser = subparsers.add_parser(
        "live", help="Run the acceptance suite against the deployed stacks."
    )
    live_parser.add_argument(
        "-k",
        dest="keyword",
        default=None,
        help="Only run live tests matching this pytest keyword expression.",
    )

    return parser.parse_args(argv)


def do_install() -> int:
    base_cmd = [sys.executable, "-m", "pip", "install"]
    in_virtualenv = sys.prefix != getattr(sys, "base_prefix", sys.prefix)
    user_flags: list[str] = [] if in_virtualenv else ["--user"]

    try:
        command = base_cmd + user_flags + ["-e", f"{ROOT}[test]"]
        logging.debug("Installing project via: %s", " ".join(command))
        subprocess.check_call(command)
    except subprocess.CalledProcessError as exc:
        return exc.returncode
    return 0


def summarize(output: str) -> str:
    """One-line summary of a pytest run from its console output."""
    collected = re.search(r"collected\s+(\d+)", output)
    passed = re.search(r"(\d+)\s+passed", output)
    coverage = re.search(r"TOTAL\s+.*?(\d+)%", output)

    total = int(collected.group(1)) if collected else 0
    success = int(passed.group(1)) if passed else 0
    summary = f"{success}/{total} test cases passed."
    if coverage:
        summary += f" {coverage.group(1)}% line coverage achieved."
    return summary


def _run_pytest(args: Sequence[str], env: Optional[Dict[str, str]] = None) -> int:
    cmd = [sys.executable, "-m", "pytest", *args]
    logging.debug("Running pytest command: %s", " ".join(cmd))
    proc = subprocess.run(cmd, cwd=ROOT, text=True, capture_output=True, env=env)
    output = (proc.stdout or "") + (proc.stderr or "")

    print(summarize(output))
    if proc.returncode != 0 and output:
        print(output)
    return proc.returncode


def do_test() -> int:
    return _run_pytest([
        "tests/unit",
        "--maxfail=1",
        "--disable-warnings",
        "--cov=cloudprobe",
        "--cov-report=term-missing",
    ])


def do_live(keyword: Optional[str] = None) -> int:
    env = dict(os.environ)
    env["CLOUDPROBE_LIVE"] = "1"
    args = ["tests/integration", "-m", "live", "-s"]
    if keyword:
        args += ["-k", keyword]
    return _run_pytest(args, env=env)


def main(argv: Sequence[str] | None = None) -> int:
    raw_args = list(argv) if argv is not None else sys.argv[1:]
    if not raw_args:
        print("Usage: run.py [install|test|live [-k EXPR]]", file=sys.stderr)
        return 1

    args = parse_args(raw_args)
    config = ProbeConfig.from_env()
    session = AwsClients.from_config(config).session if config.cloudwatch_log_group else None
    configure_logging(config, session=session)
    logging.info("Starting %s command", args.command)

    if args.command == "install":
        code = do_install()
    elif args.command == "test":
        code = do_test()
    elif args.command == "live":
        code = do_live(args.keyword)
    else:
        raise RuntimeError("Unhandled command")

    if code == 0:
        logging.info("%s command completed successfully", args.command.capitalize())
    else:
        logging.error("%s command failed with exit code %s", args.command.capitalize(), code)
    return code


if __name__ == "__main__":
    sys.exit(main())
