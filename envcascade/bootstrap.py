# Call init() once at process start, before anything reads configuration
# from the environment.
from __future__ import annotations
from typing import Optional

from envcascade.domain.profile import resolve_profile
from envcascade.l2_services.config import LoaderSettings, load_settings
from envcascade.utils.dotenv_loader import CascadeReport, load
from envcascade.utils.env import EnvTarget, env_target


def init(environ: Optional[EnvTarget] = None, settings: Optional[LoaderSettings] = None) -> CascadeReport:
    """Resolve the profile, then cascade .env -> .env.<profile> -> .env.local into `environ`.

    Raises InvalidProfile before touching any file, or EnvParseError from the
    first malformed statement. With no arguments everything comes from, and
    goes to, os.environ.
    """
    target = env_target(environ)
    cfg = settings or load_settings(target)
    profile = resolve_profile(target, cfg.selector_var)
    return load(profile, target, app_path=str(cfg.app_root), encoding=cfg.encoding)
