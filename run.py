"""CLI entrypoint: load puzzle(s), encode to CNF, solve, and report grids."""

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from solver import solve_puzzle
from src.utils.logging_utils import get_logger
from src.utils.trace import get_tracer, reset_tracer
from src.zebra.backend import SatBackend
from src.zebra.canonical import einstein_puzzle
from src.zebra.config import DEFAULT_CONF_BUDGET, DEFAULT_DATA_PATH, DEFAULT_SOLVER_NAME
from src.zebra.errors import UnsatisfiableError, ZebraError
from src.zebra.loader import PUZZLE_SUFFIXES, load_puzzles
from src.zebra.model import Puzzle
from src.zebra.parser import parse_puzzle
from src.zebra.solver_core import Solution, count_solutions

logger = get_logger("run")


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Solve logic grid puzzles through a SAT encoding")
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=Path(DEFAULT_DATA_PATH) if DEFAULT_DATA_PATH else None,
        help="Path to puzzle JSON/JSONL/parquet or a directory of them (default: the Einstein puzzle)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write solutions CSV")
    parser.add_argument("--trace", type=Path, default=None, help="Optional path to write the step trace CSV")
    parser.add_argument("--solver", default=DEFAULT_SOLVER_NAME, help="PySAT solver name (g4, cd15, m22, ...)")
    parser.add_argument(
        "--conf-budget",
        type=int,
        default=DEFAULT_CONF_BUDGET,
        help="Conflict budget per solve; the puzzle is reported unknown when it runs out",
    )
    parser.add_argument(
        "--explain-unsat",
        action="store_true",
        help="Guard each clue with a selector so unsatisfiable puzzles report the conflicting clues.",
    )
    parser.add_argument(
        "--check-unique",
        action="store_true",
        help="Also check that each puzzle has exactly one solution.",
    )
    parser.add_argument(
        "--include-status",
        action="store_true",
        help="Include a 'status' field in grid_solution.",
    )
    return parser.parse_args(argv)


def reformat_to_grid(grid: Dict[str, List[str]]) -> dict:
    """Category -> labels-by-position into a {"header", "rows"} table, houses numbered from 1."""
    categories = list(grid.keys())
    num_houses = len(grid[categories[0]]) if categories else 0
    rows: List[List[Any]] = []
    for position in range(num_houses):
        rows.append([str(position + 1)] + [grid[c][position] for c in categories])
    return {"header": ["House"] + categories, "rows": rows}


def format_solution(solution: Optional[Solution], *, include_status: bool = False) -> dict:
    grid = reformat_to_grid(solution.grid) if solution else {"header": [], "rows": []}
    if include_status:
        status = "solved" if solution else "unsolved"
        return {"status": status, **grid}
    return grid


def print_table(formatted: dict, width: int = 14) -> None:
    header = formatted["header"]
    rows = formatted["rows"]
    if not rows:
        print("(no solution)")
        return
    # Transpose so each category is a line and each house a column.
    print(f"{header[0]:<{width}}" + "".join(f"{row[0]:<{width}}" for row in rows))
    for index, category in enumerate(header[1:], start=1):
        print(f"{category:<{width}}" + "".join(f"{row[index]:<{width}}" for row in rows))


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "grid_solution", "num_clauses", "num_vars"])

        for r in results:
            writer.writerow([
                r["id"],
                json.dumps(r["grid_solution"], ensure_ascii=False, separators=(",", ":")),
                r["num_clauses"],
                r["num_vars"],
            ])


def collect_puzzles(input_path: Optional[Path]) -> List[Any]:
    if input_path is None:
        return [einstein_puzzle()]
    if input_path.is_file():
        return load_puzzles(str(input_path))
    if input_path.is_dir():
        puzzles: List[Any] = []
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
        return puzzles
    raise ValueError(f"Input path {input_path} is neither file nor directory")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    backend = SatBackend(solver_name=args.solver, conf_budget=args.conf_budget)
    puzzles = collect_puzzles(args.input)
    results = []
    failures = 0

    reset_tracer()
    tracer = get_tracer()

    for index, raw in enumerate(tqdm(puzzles, desc="Solving", unit="puzzle", disable=len(puzzles) < 2)):
        puzzle_id = raw.id if isinstance(raw, Puzzle) else str(raw.get("id", f"row_{index}"))
        solution: Optional[Solution] = None
        try:
            puzzle = raw if isinstance(raw, Puzzle) else parse_puzzle(raw)
            solution = solve_puzzle(puzzle, backend=backend, explain_unsat=args.explain_unsat)
            if args.check_unique:
                count = count_solutions(puzzle, limit=2, backend=backend)
                if count > 1:
                    logger.warning("Puzzle %s has more than one solution", puzzle_id)
        except UnsatisfiableError as exc:
            failures += 1
            logger.error("Puzzle %s is not satisfiable: %s", puzzle_id, exc)
            for description in exc.core:
                logger.error("  conflicting clue: %s", description)
        except ZebraError as exc:
            failures += 1
            logger.error("Failed to solve puzzle %s: %s", puzzle_id, exc)

        results.append({
            "id": puzzle_id,
            "grid_solution": format_solution(solution, include_status=args.include_status),
            "num_clauses": solution.num_clauses if solution else -1,
            "num_vars": solution.num_vars if solution else -1,
        })

    if args.trace:
        tracer.to_csv(args.trace)

    if args.output:
        write_results_csv(results, args.output)
    else:
        for r in results:
            print(f"\n{r['id']}  ({r['num_clauses']} clauses, {r['num_vars']} variables)")
            print_table(r["grid_solution"])

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
