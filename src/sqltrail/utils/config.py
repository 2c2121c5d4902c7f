"""Configuration management for SQL Trail.

Loads configuration from sqltrail.toml in the current working directory.
"""

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from rich.console import Console

from sqltrail.global_models import OutputFormat

console = Console(stderr=True)

CONFIG_FILE_NAME = "sqltrail.toml"


class ConfigSettings(BaseModel):
    """Configuration settings for SQL Trail.

    All fields are optional. None values indicate the setting was not
    specified in the config file.
    """

    dialect: Optional[str] = None
    output: Optional[str] = None
    output_format: Optional[OutputFormat] = None
    glob_pattern: Optional[str] = None
    recursive: Optional[bool] = None
    strict: Optional[bool] = None


def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find sqltrail.toml in the current working directory.

    Args:
        start_path: Starting directory to search for config file.
                   Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    config_path = start_path / CONFIG_FILE_NAME

    if config_path.exists() and config_path.is_file():
        return config_path

    return None


def load_config(config_path: Optional[Path] = None) -> ConfigSettings:
    """Load configuration from sqltrail.toml.

    Priority order:
    1. Explicit config_path parameter
    2. sqltrail.toml in current working directory
    3. Empty ConfigSettings (all None)

    Args:
        config_path: Optional explicit path to config file.
                    If not provided, searches current working directory.

    Returns:
        ConfigSettings with values from the [sqltrail] table or None for
        unset fields. Always returns a valid ConfigSettings object.

    Error Handling:
        - Missing file: Returns empty ConfigSettings (silent)
        - Malformed TOML: Warns user and returns empty ConfigSettings
        - Invalid values: Warns user and returns empty ConfigSettings
        - Unknown keys: Ignored (forward compatibility)
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        return ConfigSettings()

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        sqltrail_config = toml_data.get("sqltrail", {})

        try:
            return ConfigSettings(**sqltrail_config)
        except Exception as e:
            console.print(
                f"[yellow]Warning:[/yellow] Invalid configuration in {config_path}: {e}",
            )
            console.print("[yellow]Using default settings[/yellow]")
            return ConfigSettings()

    except tomllib.TOMLDecodeError as e:
        console.print(
            f"[yellow]Warning:[/yellow] Failed to parse {config_path}: {e}",
        )
        console.print("[yellow]Using default settings[/yellow]")
        return ConfigSettings()

    except OSError as e:
        console.print(
            f"[yellow]Warning:[/yellow] Could not read {config_path}: {e}",
        )
        console.print("[yellow]Using default settings[/yellow]")
        return ConfigSettings()
