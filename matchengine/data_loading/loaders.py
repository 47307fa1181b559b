"""
Profile loading for offline batch runs.

This module turns exported profile tables (JSON or CSV) into Profile
records. It does no scoring; empty cells simply become missing fields and
the scorers apply their fallbacks.

CSV layout (one row per profile):
    id, display_name, age, location, interests, bio, embedding,
    weekdays, weekends, evenings

`interests` and `weekdays` may be JSON arrays or ";"-separated strings.
`embedding` must be a JSON array. `weekends` / `evenings` accept
true/false, yes/no, 1/0.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

import pandas as pd

from ..schema import Profile

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ";"
TRUE_VALUES = {"true", "yes", "y", "1"}
FALSE_VALUES = {"false", "no", "n", "0"}


def load_profiles(filepath: str) -> List[Profile]:
    """
    Load profiles from a JSON or CSV file.

    Args:
        filepath: Path to a .json (list of objects) or .csv file

    Returns:
        List of Profile records in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, has an unsupported extension,
            or a row cannot be turned into a Profile
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profile file not found: {filepath}")

    suffix = path.suffix.lower()
    logger.info(f"Loading profiles from {filepath}")
    if suffix == ".json":
        profiles = _load_json_profiles(path)
    elif suffix == ".csv":
        profiles = profiles_from_frame(pd.read_csv(path, dtype={"id": str, "user_id": str}))
    else:
        raise ValueError(f"Unsupported profile file type: {suffix} (expected .json or .csv)")

    if not profiles:
        raise ValueError(f"Profile file is empty: {filepath}")

    logger.info(f"Loaded {len(profiles)} profiles")
    return profiles


def _load_json_profiles(path: Path) -> List[Profile]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "profiles" in data:
        data = data["profiles"]
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of profile objects in {path}")

    profiles = []
    for i, row in enumerate(data):
        if not isinstance(row, dict):
            raise ValueError(f"Profile {i} in {path} is not an object")
        try:
            profiles.append(Profile.from_dict(row))
        except ValueError as e:
            raise ValueError(f"Invalid profile at index {i} in {path}: {e}") from e
    return profiles


def profiles_from_frame(df: pd.DataFrame) -> List[Profile]:
    """
    Convert a profile DataFrame into Profile records.

    Args:
        df: DataFrame with the CSV layout described in the module docstring

    Returns:
        List of Profile records

    Raises:
        ValueError: If a row cannot be turned into a Profile
    """
    if "id" not in df.columns and "user_id" not in df.columns:
        raise ValueError("Profile table needs an 'id' or 'user_id' column")

    profiles = []
    for i, record in enumerate(df.to_dict(orient="records")):
        row = {
            key: value for key, value in record.items()
            if key not in {"weekdays", "weekends", "evenings"}
        }
        row["interests"] = parse_list_cell(record.get("interests"))
        row["embedding"] = parse_embedding_cell(record.get("embedding"))
        row["availability"] = _availability_from_record(record)
        try:
            profiles.append(Profile.from_dict(row))
        except ValueError as e:
            raise ValueError(f"Invalid profile in row {i}: {e}") from e
    return profiles


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_list_cell(value: Any) -> Optional[List[str]]:
    """Parse a JSON array or ";"-separated string into a list of strings."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    if _is_empty(value):
        return None
    text = str(value).strip()
    if text.startswith("["):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON list: {text!r}") from e
        return [str(v) for v in parsed]
    return [part.strip() for part in text.split(LIST_SEPARATOR) if part.strip()]


def parse_embedding_cell(value: Any) -> Optional[List[float]]:
    """Parse a JSON array of numbers; empty cells give None."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if _is_empty(value):
        return None
    try:
        parsed = json.loads(str(value))
    except json.JSONDecodeError as e:
        raise ValueError(f"Embedding must be a JSON array: {value!r}") from e
    if not isinstance(parsed, list):
        raise ValueError(f"Embedding must be a JSON array: {value!r}")
    return parsed


def parse_bool_cell(value: Any) -> Optional[bool]:
    """Parse a yes/no style cell; empty cells give None."""
    if _is_empty(value):
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    # numpy bools and floats read by pandas
    if text in {"1.0", "0.0"}:
        return text == "1.0"
    raise ValueError(f"Cannot read {value!r} as a boolean")


def _availability_from_record(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if isinstance(record.get("availability"), dict):
        return record["availability"]

    availability = {
        "weekdays": parse_list_cell(record.get("weekdays")),
        "weekends": parse_bool_cell(record.get("weekends")),
        "evenings": parse_bool_cell(record.get("evenings")),
    }
    if all(v is None for v in availability.values()):
        return None
    return availability
