"""Test to verify trace.py captures pipeline steps."""

import csv

from src.utils.trace import Tracer, get_tracer, reset_tracer
from src.zebra.canonical import einstein_puzzle
from src.zebra.solver_core import solve


def test_tracer_captures_steps(tmp_path):
    reset_tracer()
    tracer = get_tracer()

    tracer.log_register("Color", variables_added=25, clauses_added=55)
    tracer.log_seal(clauses_added=55)
    tracer.log_clue("The Brit lives in the red house.", "linked", clauses_added=10)
    tracer.log_solve("SATISFIABLE", num_clauses=120, num_vars=25)
    tracer.log_decode("Color")

    summary = tracer.summary()
    assert summary["total_steps"] == 5
    assert summary["registrations"] == {"Color": 1}
    assert summary["clauses_emitted"] == 120
    assert [s.step_number for s in tracer.steps] == [1, 2, 3, 4, 5]

    output_path = tmp_path / "trace.csv"
    tracer.to_csv(output_path)
    with open(output_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["action_type"] for r in rows] == ["register", "seal", "clue", "solve", "decode"]
    assert rows[2]["clue"] == "The Brit lives in the red house."


def test_disabled_tracer_records_nothing():
    tracer = Tracer(enabled=False)
    tracer.log_seal(clauses_added=3)
    assert tracer.steps == []


def test_solve_uses_global_tracer_by_default():
    reset_tracer()
    solve(einstein_puzzle())
    summary = get_tracer().summary()
    assert summary["action_counts"]["decode"] == 5
    assert summary["action_counts"]["solve"] == 1
    assert summary["clauses_emitted"] == 672
    reset_tracer()
