"""
Where ``REDDIO_*`` settings come from.

Three layers are merged, lowest first: the process environment (or an
explicit ``base`` mapping), an optional ``.env`` file that only fills keys
still missing, and caller overrides. The result feeds
:meth:`reddio_pay.core.config.ClientConfig.from_mapping`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

__all__ = ["ClientEnvironment", "build_environment", "load_env_file"]

_QUOTES = ("'", '"')


def _parse_line(raw_line: str) -> Optional[Tuple[str, str]]:
    """Split one ``.env`` line into ``(key, value)``; blanks and comments give ``None``."""
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    key, value = (part.strip() for part in line.split("=", 1))
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        value = value[1:-1]
    return key, value


def _read_env_file(path: Path) -> Dict[str, str]:
    if not path.is_file():
        return {}
    pairs = (_parse_line(line) for line in path.read_text(encoding="utf-8").splitlines())
    return dict(pair for pair in pairs if pair is not None)


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy the variables of ``path`` into ``environ`` (default :data:`os.environ`)
    without replacing keys it already has, and return the merged mapping.
    """
    target: MutableMapping[str, str] = os.environ if environ is None else environ
    for key, value in _read_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class ClientEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> ClientEnvironment:
    """
    Merge ``base``, ``env_file`` and ``overrides`` into a :class:`ClientEnvironment`.

    Pass ``env_file=None`` to skip the file. An empty ``base`` is honored
    as-is rather than falling back to the process environment.
    """
    variables: Dict[str, str] = dict(os.environ) if base is None else dict(base)
    if env_file is not None:
        for key, value in _read_env_file(Path(env_file)).items():
            variables.setdefault(key, value)
    variables.update(overrides or {})
    return ClientEnvironment(variables=variables)
