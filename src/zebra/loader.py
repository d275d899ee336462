import json
import os
import re
from typing import Any, Dict, List, Optional

import pandas as pd

from src.utils.logging_utils import get_logger

logger = get_logger("loader")

PUZZLE_SUFFIXES = (".json", ".jsonl", ".parquet")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads raw puzzle records from .json, .jsonl or .parquet files.

    Structured records (with "categories") pass through untouched; text
    records get their "puzzle" text and "size" normalised for the parser.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.endswith(".parquet"):
        try:
            df = pd.read_parquet(file_path)
        except (OSError, ValueError, ImportError) as exc:
            logger.error("Error reading parquet %s: %s", file_path, exc)
            return []
        return _normalize_all(df.to_dict(orient="records"))

    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL.
            return _normalize_all(_read_lines(raw.splitlines()))
        if isinstance(payload, list):
            return _normalize_all(p for p in payload if isinstance(p, dict))
        if isinstance(payload, dict):
            return _normalize_all([payload])
        return []

    with open(file_path, "r", encoding="utf-8") as f:
        return _normalize_all(_read_lines(f))


def _read_lines(lines) -> List[Dict[str, Any]]:
    data = []
    for line in lines:
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed JSONL line: %.60s", line.strip())
            continue
        if isinstance(obj, dict):
            data.append(obj)
    return data


def _normalize_all(records) -> List[Dict[str, Any]]:
    return [_normalize_record(r) for r in records]


def _is_nonempty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _infer_size(value: Any) -> Optional[str]:
    if _is_nonempty_str(value):
        match = re.search(r"-(\d+)x(\d+)-", value)
        if match:
            return f"{match.group(1)}*{match.group(2)}"
    return None


def _extract_puzzle_text(record: Dict[str, Any]) -> str:
    if _is_nonempty_str(record.get("puzzle")):
        return record["puzzle"].strip()

    for key in ("puzzle_text", "prompt", "text", "question", "input"):
        if _is_nonempty_str(record.get(key)):
            return record[key].strip()

    best = ""
    best_score = 0
    for value in record.values():
        if not _is_nonempty_str(value):
            continue
        score = 0
        if "## Clues" in value:
            score += 2
        if "There are " in value and " houses" in value:
            score += 1
        if score > best_score:
            best = value
            best_score = score
    return best.strip()


def _normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
    if "categories" in record:
        return record

    puzzle_text = _extract_puzzle_text(record)
    if puzzle_text:
        record["puzzle"] = puzzle_text

    if not _is_nonempty_str(record.get("size")):
        inferred = _infer_size(record.get("id"))
        if inferred:
            record["size"] = inferred
        elif puzzle_text:
            match = re.search(r"There are (\d+) houses", puzzle_text)
            if match:
                record["size"] = f"{match.group(1)}*0"
    return record
