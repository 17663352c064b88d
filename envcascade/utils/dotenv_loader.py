from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from typing import IO, Dict, Iterator, List, Optional, Tuple

from dotenv.parser import parse_stream

from envcascade.domain.profile import EnvCascadeError, Profile
from envcascade.utils.env import EnvTarget, env_target, set_var

log = logging.getLogger(__name__)

BASE_FILE = ".env"
LOCAL_FILE = ".env.local"


class EnvParseError(EnvCascadeError):
    def __init__(self, path: str, line: int, statement: str):
        self.path = path
        self.line = line
        self.statement = statement
        first = statement.splitlines()[0] if statement else statement
        super().__init__(f"{path}:{line}: could not parse statement {first!r}")


@dataclass
class FileLoad:
    name: str
    path: str
    exists: bool
    pairs: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def keys(self) -> List[str]:
        return [k for k, _ in self.pairs]


@dataclass
class CascadeReport:
    profile: Profile
    files: List[FileLoad] = field(default_factory=list)

    @property
    def applied(self) -> Dict[str, str]:
        """Merged view of everything written, last writer wins."""
        out: Dict[str, str] = {}
        for f in self.files:
            out.update(f.pairs)
        return out

    def as_dict(self) -> dict:
        return {
            "profile": str(self.profile),
            "files": [{"name": f.name, "path": f.path, "exists": f.exists, "keys": f.keys} for f in self.files],
        }


def candidate_files(profile: Profile) -> List[str]:
    # order is precedence: base, profile, local (later wins)
    return [BASE_FILE, f".env.{str(profile)}", LOCAL_FILE]


def parse_env_stream(stream: IO[str], path: str = "<stream>") -> Iterator[Tuple[str, str]]:
    """Yield (key, value) pairs from a dotenv stream in file order.
    Blank and comment lines are skipped. Raises EnvParseError on the first
    statement that is not a KEY=value assignment (a bare KEY included).
    """
    for binding in parse_stream(stream):
        if binding.error or (binding.key is not None and binding.value is None):
            text = binding.original.string
            # the mark sits before any blank lines leading into the statement
            lead = text[: len(text) - len(text.lstrip())]
            raise EnvParseError(path, binding.original.line + lead.count("\n"), text.strip())
        if binding.key is None:
            continue
        yield binding.key, binding.value


def _decode_error(path: str, e: UnicodeDecodeError) -> EnvParseError:
    # the parser reads the whole file up front, so e.object holds its raw bytes
    raw = bytes(e.object)
    line = raw[: e.start].count(b"\n") + 1
    start = raw.rfind(b"\n", 0, e.start) + 1
    end = raw.find(b"\n", e.start)
    statement = raw[start:] if end < 0 else raw[start:end]
    return EnvParseError(path, line, statement.decode(e.encoding, errors="replace"))


def load(profile: Profile, environ: Optional[EnvTarget] = None, app_path: Optional[str] = None,
         encoding: str = "utf-8") -> CascadeReport:
    """Apply .env, .env.<profile> and .env.local from `app_path` (cwd if None)
    to `environ` (os.environ if None), in that order.

    Missing files are skipped. A malformed statement raises EnvParseError and
    stops the cascade; pairs written before it stay written, nothing is rolled
    back. Caller must be the only writer of `environ` during the call.
    """
    target = env_target(environ)
    app = app_path or "."
    report = CascadeReport(profile)
    for name in candidate_files(profile):
        path = os.path.join(app, name)
        try:
            f = open(path, "r", encoding=encoding)
        except FileNotFoundError:
            log.debug("Skipped %s (not found)", path)
            report.files.append(FileLoad(name, path, exists=False))
            continue
        entry = FileLoad(name, path, exists=True)
        report.files.append(entry)
        with f:
            try:
                for key, value in parse_env_stream(f, path):
                    set_var(target, key, value)
                    entry.pairs.append((key, value))
            except UnicodeDecodeError as e:
                raise _decode_error(path, e) from e
        log.debug("Loaded environment variables from %s: %s", path, ", ".join(entry.keys) or "-")
    return report
