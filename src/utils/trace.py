"""Tracing module: records encoding/solving steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.utils.logging_utils import get_logger

logger = get_logger("trace")


@dataclass
class TraceStep:
    """A single step of the encode -> solve -> decode pipeline."""

    timestamp: float
    step_number: int
    action_type: str  # 'register', 'seal', 'clue', 'solve', 'decode'
    category: Optional[str] = None
    clue: Optional[str] = None
    clauses_added: Optional[int] = None
    variables_added: Optional[int] = None
    status: Optional[str] = None
    reason: Optional[str] = None


class Tracer:
    """Records pipeline steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Elapsed seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_register(self, category: str, variables_added: int, clauses_added: int):
        """Log a category registration."""
        self._record(
            'register',
            category=category,
            variables_added=variables_added,
            clauses_added=clauses_added,
        )

    def log_seal(self, clauses_added: int):
        """Log the per-position exclusivity pass that seals the registry."""
        self._record('seal', clauses_added=clauses_added)

    def log_clue(self, description: str, kind: str, clauses_added: int, variables_added: int = 0):
        """Log one encoded clue."""
        self._record(
            'clue',
            clue=description,
            reason=kind,
            clauses_added=clauses_added,
            variables_added=variables_added,
        )

    def log_solve(self, status: str, num_clauses: int, num_vars: int, reason: str = ""):
        """Log a solver call and its outcome."""
        self._record(
            'solve',
            status=status,
            clauses_added=num_clauses,
            variables_added=num_vars,
            reason=reason or None,
        )

    def log_decode(self, category: str, status: str = "ok", reason: str = ""):
        """Log decoding of one category."""
        self._record('decode', category=category, status=status, reason=reason or None)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            logger.info("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'category', 'clue',
            'clauses_added', 'variables_added', 'status', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        logger.info("Trace written to %s (%d steps)", filepath, len(self.steps))

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        registrations: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1
            if step.action_type == 'register':
                registrations[step.category] = registrations.get(step.category, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'registrations': registrations,
            'num_clues': action_counts.get('clue', 0),
            'clauses_emitted': sum(
                s.clauses_added or 0 for s in self.steps if s.action_type in ('register', 'seal', 'clue')
            ),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
