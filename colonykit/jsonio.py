"""Reading and writing JSON files that may contain comments."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class JsonFileError(ValueError):
    """A JSON file could not be read, parsed or written."""


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside of JSON strings."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        c = text[i]
        if in_string:
            out.append(c)
            if c == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if c == '"':
                in_string = False
            i += 1
            continue
        if c == '"':
            in_string = True
            out.append(c)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise JsonFileError("unterminated block comment")
            out.append(" ")
            i = end + 2
        else:
            out.append(c)
            i += 1
    return "".join(out)


def json_file_load(path: PathLike) -> Any:
    """Parse the JSON file at ``path``, allowing comments."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.error("%s not found: %s", path, e.strerror or e)
        raise JsonFileError(f"{path} not found: {e}") from e
    try:
        data = json.loads(strip_json_comments(text))
    except (json.JSONDecodeError, JsonFileError) as e:
        logger.error("%s parsing error %s", path, e)
        raise JsonFileError(f"{path} parsing error: {e}") from e
    logger.info("%s parsed successfully", path)
    return data


def json_file_write(data: Any, path: PathLike) -> None:
    """Write ``data`` to ``path`` as JSON indented by four spaces."""
    text = json.dumps(data, indent=4, sort_keys=True, ensure_ascii=False)
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write data to file %s", path)
        raise JsonFileError(f"failed to write {path}: {e}") from e