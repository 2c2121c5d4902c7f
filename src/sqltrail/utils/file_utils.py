"""File utility functions for SQL Trail."""

from pathlib import Path
from typing import List


def read_sql_file(file_path: Path) -> str:
    """
    Read a SQL file and return its contents as a string.

    Args:
        file_path: Path to the SQL file to read

    Returns:
        The contents of the SQL file as a string

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the path is not a file
        PermissionError: If the file cannot be read
        UnicodeDecodeError: If the file encoding is not UTF-8
    """
    if not file_path.exists():
        raise FileNotFoundError(f"SQL file not found: {file_path}")

    if not file_path.is_file():
        raise ValueError(f"Path is not a file: {file_path}")

    try:
        return file_path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise PermissionError(f"Cannot read file {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise UnicodeDecodeError(
            e.encoding,
            e.object,
            e.start,
            e.end,
            f"File {file_path} is not valid UTF-8: {e.reason}",
        ) from e


def find_sql_files(
    dir_path: Path,
    recursive: bool = False,
    glob_pattern: str = "*.sql",
) -> List[Path]:
    """
    List the SQL files in a directory, sorted by path.

    Args:
        dir_path: Directory to search
        recursive: Whether to descend into subdirectories
        glob_pattern: Glob pattern for SQL files

    Returns:
        Sorted list of matching file paths

    Raises:
        FileNotFoundError: If the directory does not exist
        ValueError: If the path is not a directory
    """
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory not found: {dir_path}")

    if not dir_path.is_dir():
        raise ValueError(f"Not a directory: {dir_path}")

    pattern = f"**/{glob_pattern}" if recursive else glob_pattern

    return [path for path in sorted(dir_path.glob(pattern)) if path.is_file()]
