from __future__ import annotations
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from envcascade.domain.profile import Profile
from envcascade.utils.dotenv_loader import candidate_files


@dataclass
class FileStatus:
    name: str
    path: str
    exists: bool
    size: Optional[int]
    note: str = ""


def _file_status(name: str, app_path: str) -> FileStatus:
    path = os.path.join(app_path, name)
    if not os.path.exists(path):
        return FileStatus(name, path, False, None, "absent")
    if not os.path.isfile(path):
        return FileStatus(name, path, True, None, "not a regular file")
    return FileStatus(name, path, True, os.path.getsize(path))


def file_statuses(profile: Profile, app_path: str = ".") -> List[FileStatus]:
    return [_file_status(n, app_path) for n in candidate_files(profile)]


def snapshot(profile: Profile, app_path: str = ".") -> Dict[str, Any]:
    """Read-only view of the candidate files for `profile`, in precedence order."""
    return {
        "profile": str(profile),
        "app": app_path,
        "files": [asdict(s) for s in file_statuses(profile, app_path)],
    }
