"""
Pipeline configuration.

Defaults point at the public HR_1.csv dataset. Values can be overridden
through a .env file or the environment, and again on the command line.
"""
import os
import json
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_URL = (
    "https://raw.githubusercontent.com/nogibjj/"
    "Mini_PJT_6_Complex-SQL-Query-for-a-MySQL-Database_ISL/main/data_raw/HR_1.csv"
)
DEFAULT_FILE_PATH = "HR_1.csv"
DEFAULT_TABLE = "HR_1"
DEFAULT_TIMEOUT = 10
DEFAULT_READ_LIMIT = 5
DEFAULT_KEY_COLUMN = "EmployeeNumber"
DEFAULT_KEY_VALUE = "99999"
DEFAULT_UPDATE_COLUMN = "Department"
DEFAULT_UPDATE_VALUE = "Sales"
DEFAULT_LOG_LEVEL = "INFO"


def _default_create_values() -> Dict[str, str]:
    return {
        DEFAULT_KEY_COLUMN: DEFAULT_KEY_VALUE,
        "Age": "35",
        "Attrition": "No",
        "Department": "Research & Development",
        "JobRole": "Research Scientist",
    }


@dataclass
class QueryParams:
    """Table and values used by the create/read/update/delete operations."""

    table: str = DEFAULT_TABLE
    key_column: str = DEFAULT_KEY_COLUMN
    key_value: str = DEFAULT_KEY_VALUE
    create_values: Dict[str, str] = field(default_factory=_default_create_values)
    read_limit: int = DEFAULT_READ_LIMIT
    update_column: str = DEFAULT_UPDATE_COLUMN
    update_value: str = DEFAULT_UPDATE_VALUE

    def with_key(self, key_column: str, key_value: str) -> "QueryParams":
        """Copy targeting a different row; the created row carries the new key."""
        values = dict(self.create_values)
        if values.get(self.key_column) == self.key_value:
            del values[self.key_column]
        values[key_column] = key_value
        return replace(self, key_column=key_column, key_value=key_value, create_values=values)

    def with_create_values(self, values: Dict[str, str]) -> "QueryParams":
        """Copy inserting ``values``; the key column is filled in when missing."""
        values = dict(values)
        values.setdefault(self.key_column, self.key_value)
        return replace(self, create_values=values)


@dataclass
class PipelineConfig:
    url: str = DEFAULT_URL
    file_path: str = DEFAULT_FILE_PATH
    db_path: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    replace: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Optional[str] = None
    query: QueryParams = field(default_factory=QueryParams)

    @property
    def database(self) -> str:
        """Database file path; defaults to the source file with a .db suffix."""
        if self.db_path:
            return self.db_path
        stem, _ = os.path.splitext(self.file_path)
        return f"{stem}.db"


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from e


def _json_object_setting(env: Mapping[str, str], key: str) -> Optional[Dict[str, str]]:
    raw = env.get(key)
    if raw is None or raw == "":
        return None
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{key} must be a JSON object, got {raw!r}") from e
    if not isinstance(values, dict) or not values:
        raise ValueError(f"{key} must be a non-empty JSON object, got {raw!r}")
    return {str(column): str(value) for column, value in values.items()}


def parse_assignment(text: str) -> Tuple[str, str]:
    """
    Split a ``COLUMN=VALUE`` command-line argument.

    Args:
        text: Argument text; the value may itself contain "="

    Returns:
        Tuple of (column, value)
    """
    column, sep, value = text.partition("=")
    column = column.strip()
    if not sep or not column:
        raise ValueError(f"Expected COLUMN=VALUE, got {text!r}")
    return column, value


def load_config(env: Optional[Mapping[str, str]] = None) -> PipelineConfig:
    """
    Build a PipelineConfig from environment variables.

    Args:
        env: Mapping to read settings from (default: os.environ after loading .env)

    Returns:
        Populated PipelineConfig
    """
    if env is None:
        load_dotenv()
        env = os.environ

    query = QueryParams(
        table=env.get("ETL_TABLE", DEFAULT_TABLE),
        read_limit=_int_setting(env, "ETL_READ_LIMIT", DEFAULT_READ_LIMIT),
        update_column=env.get("ETL_UPDATE_COLUMN", DEFAULT_UPDATE_COLUMN),
        update_value=env.get("ETL_UPDATE_VALUE", DEFAULT_UPDATE_VALUE),
    ).with_key(
        env.get("ETL_KEY_COLUMN", DEFAULT_KEY_COLUMN),
        env.get("ETL_KEY_VALUE", DEFAULT_KEY_VALUE),
    )
    create_values = _json_object_setting(env, "ETL_CREATE_VALUES")
    if create_values is not None:
        query = query.with_create_values(create_values)

    return PipelineConfig(
        url=env.get("ETL_SOURCE_URL", DEFAULT_URL),
        file_path=env.get("ETL_FILE_PATH", DEFAULT_FILE_PATH),
        db_path=env.get("ETL_DB_PATH") or None,
        timeout=_int_setting(env, "ETL_TIMEOUT", DEFAULT_TIMEOUT),
        log_level=env.get("ETL_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        log_dir=env.get("ETL_LOG_DIR") or None,
        query=query,
    )
