import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

logger = logging.getLogger(__name__)

RANK_COLUMN_PATTERN = re.compile(r"^rank_(\d+)$")
RANKINGS_SEPARATOR = "|"


def load_vote_records(path: Union[str, Path]) -> List[Any]:
    """
    Load vote records from a JSON or CSV file.

    JSON files hold a list of records ({"rankings": [...]}) or bare lists.
    CSV files hold one ballot per row, either as rank_1..rank_n columns or
    as a single "rankings" column separated by "|".

    Args:
        path: Path to the vote record file

    Returns:
        List of vote records suitable for normalize_ballots()
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vote record file not found: {path}")

    logger.info(f"Loading vote records from: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        records = _load_json_records(path)
    elif suffix == ".csv":
        records = _load_csv_records(path)
    else:
        raise ValueError(f"Unsupported vote record format: {path.suffix or '(none)'}")

    logger.info(f"Loaded {len(records)} vote records")
    return records


def _load_json_records(path: Path) -> List[Any]:
    with open(path, "r") as f:
        data = json.load(f)

    # Accept {"votes": [...]} as exported by the voting app
    if isinstance(data, dict):
        data = data.get("votes", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of vote records in {path}")
    return data


def _load_csv_records(path: Path) -> List[Dict[str, Any]]:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    if "rankings" in df.columns:
        return [
            {"rankings": _split_rankings(value)} for value in df["rankings"].tolist()
        ]

    rank_columns = []
    for column in df.columns:
        match = RANK_COLUMN_PATTERN.match(column)
        if match:
            rank_columns.append((int(match.group(1)), column))
    rank_columns.sort()
    if not rank_columns:
        raise ValueError(f"No 'rankings' or rank_N columns found in {path}")

    records = []
    for _, row in df.iterrows():
        rankings = []
        for _, column in rank_columns:
            value = row[column].strip()
            if not value:
                break  # Blank cell ends the ranking
            rankings.append(value)
        records.append({"rankings": rankings})
    return records


def _split_rankings(value: str) -> List[str]:
    return [part.strip() for part in value.split(RANKINGS_SEPARATOR) if part.strip()]
