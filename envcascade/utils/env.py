from __future__ import annotations
import os
from typing import Dict, Iterable, MutableMapping, Optional

# Anything dict-like can receive loaded variables; os.environ is the default.
# Writers assume they are the only one mutating the target for the duration
# of a load: there is no locking here.
EnvTarget = MutableMapping[str, str]


def env_target(environ: Optional[EnvTarget] = None) -> EnvTarget:
    return os.environ if environ is None else environ


def set_var(target: EnvTarget, key: str, value: str) -> None:
    # unconditional overwrite, later files win
    target[key] = value


def pick(target: EnvTarget, keys: Iterable[str]) -> Dict[str, Optional[str]]:
    """Return {key: value-or-None} for the requested keys."""
    return {k: target.get(k) for k in keys}
