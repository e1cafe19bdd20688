"""Read and edit the project's .env file in place."""

import logging
import re
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class EnvFileError(Exception):
    """The .env file could not be read or written."""


class MissingTemplateError(EnvFileError):
    """The .env file is missing and there is no template to create it from."""


def _key_pattern(key: str) -> re.Pattern:
    # [^\r\n] keeps CRLF line endings intact
    return re.compile(rf"^{re.escape(key)}=[^\r\n]*", re.MULTILINE)


def _append_line(content: str, line: str) -> str:
    if content and not content.endswith("\n"):
        content += "\n"
    return content + line


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def apply_default(content: str, key: str, value: str) -> tuple[str, bool]:
    """Append KEY=value unless a line for KEY already exists."""
    if _key_pattern(key).search(content):
        return content, False
    return _append_line(content, f"{key}={value}"), True


def apply_value(content: str, key: str, value: str) -> tuple[str, bool]:
    """Rewrite the first KEY= line as KEY="value", appending it if absent.

    The value is quoted verbatim; embedded quotes are not escaped.
    """
    line = f'{key}="{value}"'
    new_content, count = _key_pattern(key).subn(lambda _: line, content, count=1)
    if not count:
        new_content = _append_line(content, line)
    return new_content, new_content != content


def read_env(path: Path) -> dict[str, str]:
    """Parse a .env file into a dict. The first occurrence of a key wins."""
    result: dict[str, str] = {}
    if not path.exists():
        return result
    for line in _read(path).splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            key, _, value = line.partition("=")
            result.setdefault(key.strip(), _unquote(value.strip()))
    return result


def _read(path: Path) -> str:
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise EnvFileError(f"Cannot read {path}: {e}") from e


def check_readable(path: Path) -> None:
    """Raise EnvFileError if path exists but cannot be read as UTF-8 text."""
    if path.exists():
        _read(path)


def _write(path: Path, content: str) -> None:
    """Atomic write: write to temp file, set permissions, then rename."""
    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    except OSError as e:
        raise EnvFileError(f"Cannot write {path}: {e}") from e
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        tmp.chmod(0o600)
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise EnvFileError(f"Cannot write {path}: {e}") from e


def _edit(path: Path, key: str, value: str, apply) -> bool:
    if not path.exists():
        raise EnvFileError(f"{path} does not exist")
    content = _read(path)
    new_content, changed = apply(content, key, value)
    if changed:
        _write(path, new_content)
    return changed


def ensure_env_file(path: Path, template_path: Path) -> bool:
    """Copy the template to path if path does not exist yet.

    Returns True if the file was created.
    """
    if path.exists():
        return False
    if not template_path.exists():
        raise MissingTemplateError(
            f"{path.name} is missing and template {template_path} was not found"
        )
    try:
        shutil.copyfile(template_path, path)
        path.chmod(0o600)
    except OSError as e:
        raise EnvFileError(f"Cannot copy {template_path} to {path}: {e}") from e
    logger.info("Created %s from %s", path, template_path.name)
    return True


def ensure_key_default(path: Path, key: str, value: str) -> bool:
    """Add KEY=value to the file if KEY is not set. Never overwrites."""
    changed = _edit(path, key, value, apply_default)
    if changed:
        logger.info("Added %s to %s", key, path)
    return changed


def set_key(path: Path, key: str, value: str) -> bool:
    """Set KEY="value" in the file, updating the first occurrence in place."""
    changed = _edit(path, key, value, apply_value)
    if changed:
        logger.info("Updated %s in %s", key, path)
    return changed
