from __future__ import annotations
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from envcascade.domain.profile import SELECTOR_VAR


class LoaderSettings(BaseModel):
    selector_var: str = SELECTOR_VAR
    app_root: Path = Field(default_factory=Path.cwd, description="Directory holding the .env files.")
    encoding: str = "utf-8"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> LoaderSettings:
    """Build LoaderSettings from ENVCASCADE_APP, ENVCASCADE_SELECTOR and
    ENVCASCADE_ENCODING. Unset or empty variables fall back to the model
    defaults, so the files are read from the cwd unless ENVCASCADE_APP is set.
    """
    env = os.environ if environ is None else environ
    raw = {
        "app_root": env.get("ENVCASCADE_APP"),
        "selector_var": env.get("ENVCASCADE_SELECTOR"),
        "encoding": env.get("ENVCASCADE_ENCODING"),
    }
    return LoaderSettings(**{k: v for k, v in raw.items() if v})
