from __future__ import annotations
import os
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

SELECTOR_VAR = "APP_ENV"


class EnvCascadeError(Exception):
    pass


class InvalidProfile(EnvCascadeError, ValueError):
    """Raised when the selector variable holds an unrecognised profile name."""

    def __init__(self, raw: str, var: str = SELECTOR_VAR):
        self.raw = raw
        self.var = var
        self.choices: Tuple[str, ...] = tuple(_BY_TEXT)
        quoted = " or ".join(f"'{c}'" for c in self.choices)
        super().__init__(f"Invalid {var}: {raw}. Must be {quoted}")


class Profile(Enum):
    DEV = "dev"
    PROD = "prod"

    def __str__(self) -> str:
        return _BY_PROFILE[self]

    @classmethod
    def parse(cls, text: str, var: str = SELECTOR_VAR) -> "Profile":
        # exact, case-sensitive match only
        try:
            return _BY_TEXT[text]
        except KeyError:
            raise InvalidProfile(text, var) from None


DEFAULT_PROFILE = Profile.DEV

_BY_TEXT: Dict[str, Profile] = {"dev": Profile.DEV, "prod": Profile.PROD}
_BY_PROFILE: Dict[Profile, str] = {p: t for t, p in _BY_TEXT.items()}


def resolve_profile(environ: Optional[Mapping[str, str]] = None, var: str = SELECTOR_VAR) -> Profile:
    """Return the active profile from `var` in `environ` (os.environ if None).
    Unset means DEFAULT_PROFILE; any other value must be an exact profile name.
    """
    env = os.environ if environ is None else environ
    raw = env.get(var)
    if raw is None:
        return DEFAULT_PROFILE
    return Profile.parse(raw, var)
