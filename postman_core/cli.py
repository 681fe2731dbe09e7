"""
Command-line entry point for patrol route planning.

Usage:
    postman-route network.json [--mode full|progressive] [--start ID]
                               [--output route.json] [--log-file PATH] [-v]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import SolverConfig
from .coverage import PatrolCoveragePlanner
from .exceptions import InvalidGraphError, PostmanError
from .logging_config import get_logger, log_exception, setup_logging
from .network_loader import load_network
from .solver import ChinesePostmanSolver


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postman-route",
        description="Chinese Postman patrol routes for street networks",
    )
    parser.add_argument("network", help="JSON street network file")
    parser.add_argument("--mode", choices=["full", "progressive"], default="full",
                        help="Solve the whole network at once or patch by patch (default: full)")
    parser.add_argument("--start", type=int, help="Starting vertex id")
    parser.add_argument("--algorithm", choices=["fleury", "hierholzer"], default="fleury",
                        help="Eulerian tour algorithm (default: fleury)")
    parser.add_argument("--max-patches", type=int, help="Stop progressive coverage after N patches")
    parser.add_argument("--strict", action="store_true", help="Reject duplicate vertex ids instead of warning")
    parser.add_argument("--output", "-o", help="Write the route as JSON to this path")
    parser.add_argument("--log-file", help="Also log to this file (rotated)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def _solve_full(graph, config: SolverConfig, start: Optional[int], logger: logging.Logger) -> Dict[str, Any]:
    solution = ChinesePostmanSolver(config=config).solve(graph, start)

    for message in solution.messages:
        logger.info(f"  {message}")

    return {
        "mode": "full",
        "network": graph.name,
        "route": solution.route,
        "total_weight": solution.total_weight,
        "deadhead_weight": solution.deadhead_weight,
        "matched_pairs": [list(p) for p in solution.matched_pairs],
        "is_closed": solution.is_closed,
    }


def _solve_progressive(graph, config: SolverConfig, start: int, logger: logging.Logger) -> Dict[str, Any]:
    plan = PatrolCoveragePlanner(graph, config=config).plan(start)

    logger.info(f"  Patches: {len(plan.patches)}")
    logger.info(f"  Coverage: {plan.coverage_ratio * 100:.1f}%")
    logger.info(f"  Total weight: {plan.total_weight:.1f} ({plan.transfer_weight:.1f} in transfers)")

    patches: List[Dict[str, Any]] = [
        {
            "seed": p.seed,
            "edges": p.edge_indices,
            "transfer": p.transfer,
            "route": p.route,
            "route_weight": p.route_weight,
        }
        for p in plan.patches
    ]
    return {
        "mode": "progressive",
        "network": graph.name,
        "route": plan.full_route(),
        "total_weight": plan.total_weight,
        "coverage": plan.coverage_ratio,
        "patches": patches,
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    try:
        config = SolverConfig(
            tour_algorithm=args.algorithm,
            max_patches=args.max_patches,
            strict_vertices=args.strict,
        )
        graph = load_network(args.network, strict=config.strict_vertices)
        if graph.vertex_count == 0:
            raise InvalidGraphError(f"Network '{graph.name}' has no vertices")

        logger.info("=" * 60)
        logger.info(f"SOLVING '{graph.name}' ({args.mode})")
        logger.info("=" * 60)

        if args.mode == "full":
            result = _solve_full(graph, config, args.start, logger)
        else:
            start = args.start if args.start is not None else graph.vertex_ids()[0]
            result = _solve_progressive(graph, config, start, logger)
    except PostmanError as e:
        log_exception(logger, "Route planning failed", e)
        return 1

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open("w", encoding="utf-8") as f:
                json.dump(result, f, indent=2)
        except OSError as e:
            log_exception(logger, f"Could not write route to {output_path}", e)
            return 1
        logger.info(f"Route written to {output_path}")
    else:
        json.dump(result, sys.stdout)
        sys.stdout.write("\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
