#!/usr/bin/env python3
"""
pagemap CLI - map the interactive elements of a page

Usage:
    pagemap [--url URL] [--env LOCAL|BROWSERBASE|BROWSERLESS] [--model provider/model] [-o result.json]
    URL=https://example.com pagemap-env [-o result.json]

`pagemap` targets the built-in page unless --url is given; `pagemap-env`
requires the URL environment variable and exits with 1 when it is missing.
"""

import sys
import os
import argparse
import asyncio
import dataclasses
import json
import shlex
from pathlib import Path
from typing import Optional, List

from ..config import Config, SESSION_ENVS, config
from ..diagnostics import get_logger, set_log_level
from ..models import DEFAULT_TARGET_URL, build_instruction
from ..workflow import run_workflow, SessionFactory
from pagemap_logs import create_run_logger

logger = get_logger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('--env', choices=SESSION_ENVS, type=str.upper, help='Browser session provider')
    parser.add_argument('--model', help='Model identifier, e.g. google/gemini-2.5-flash-preview-05-20')
    parser.add_argument('--headed', action='store_true', help='Show the local browser window')
    parser.add_argument('--output', '-o', help='Write the execution result as JSON to this file')
    parser.add_argument('--no-run-log', action='store_true', help='Do not write the markdown run log')
    parser.add_argument('--verbose', action='store_true', help='Verbose output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Quiet mode')


def _configure_logging(args):
    # PAGEMAP_VERBOSE: 0 errors only, 1 info, 2 debug
    level = 2 if args.verbose else 0 if args.quiet else config.verbose
    if level >= 2:
        set_log_level("DEBUG")
    elif level <= 0:
        set_log_level("ERROR")


def _build_config(args) -> Config:
    overrides = {}
    if args.env:
        overrides["env"] = args.env
    if args.model:
        overrides["model_name"] = args.model
    if args.headed:
        overrides["headless"] = False
    if args.no_run_log:
        overrides["run_log_enabled"] = False
    return dataclasses.replace(config, **overrides) if overrides else config


def _write_output(path: str, payload: dict):
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info(f"Result written to: {out}")


def execute(url: str, args, session_factory: Optional[SessionFactory] = None) -> int:
    """Run the workflow once, log the execution result and return the exit code."""
    cfg = _build_config(args)
    run_logger = None
    if cfg.run_log_enabled:
        run_logger = create_run_logger(
            instruction=build_instruction(url),
            url=url,
            command_line=" ".join(shlex.quote(a) for a in sys.argv),
            log_dir=str(cfg.log_dir),
        )

    result = asyncio.run(run_workflow(url, cfg, session_factory=session_factory, run_logger=run_logger))

    payload = result.to_dict()
    logger.info(f"Execution result: {json.dumps(payload, ensure_ascii=False)}")
    if run_logger:
        logger.info(f"Run log: {run_logger.log_path}")
    if args.output:
        _write_output(args.output, payload)
    return result.exit_code


def main(argv: Optional[List[str]] = None, session_factory: Optional[SessionFactory] = None) -> int:
    """Entry point of the built-in-target variant"""
    parser = argparse.ArgumentParser(
        description="Extract the interactive elements of a page with an LLM-driven browser session",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--url', default=DEFAULT_TARGET_URL, help=f'Target page (default: {DEFAULT_TARGET_URL})')
    _add_common_arguments(parser)
    args = parser.parse_args(argv)
    _configure_logging(args)
    return execute(args.url, args, session_factory)


def main_env(argv: Optional[List[str]] = None, session_factory: Optional[SessionFactory] = None) -> int:
    """Entry point of the URL-from-environment variant"""
    parser = argparse.ArgumentParser(
        description="Extract the interactive elements of the page named by the URL environment variable",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    _add_common_arguments(parser)
    args = parser.parse_args(argv)
    _configure_logging(args)

    url = os.getenv("URL")
    if not url:
        logger.error("URL environment variable is required")
        return 1
    return execute(url, args, session_factory)


if __name__ == "__main__":
    sys.exit(main())
