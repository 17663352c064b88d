import os

import pytest

from envcascade.bootstrap import init
from envcascade.domain.profile import InvalidProfile, Profile
from envcascade.l2_services.config import LoaderSettings
from envcascade.utils.dotenv_loader import EnvParseError

_TOUCHED = ["APP", "ENVCASCADE_APP", "APP_ENV", "ENVCASCADE_SELECTOR", "ENVCASCADE_ENCODING", "TEST_VAR", "BASE_VAR",
            "DEV_VAR", "PROD_VAR", "A", "CWD_VAR"]


def _isolate(monkeypatch, tmp_path):
    # setenv first so monkeypatch restores the original state on teardown
    for k in _TOUCHED:
        monkeypatch.setenv(k, "x")
        monkeypatch.delenv(k)
    monkeypatch.chdir(tmp_path)


def test_init_loads_from_cwd_into_process_env(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    (tmp_path / ".env").write_text("TEST_VAR=hello\n")
    report = init()
    assert os.environ["TEST_VAR"] == "hello"
    assert report.profile is Profile.DEV


def test_init_defaults_to_dev_files(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    (tmp_path / ".env").write_text("BASE_VAR=base\n")
    (tmp_path / ".env.dev").write_text("DEV_VAR=development\n")
    init()
    assert os.environ["BASE_VAR"] == "base"
    assert os.environ["DEV_VAR"] == "development"


def test_init_prod_when_selected(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    monkeypatch.setenv("APP_ENV", "prod")
    (tmp_path / ".env").write_text("BASE_VAR=base\n")
    (tmp_path / ".env.prod").write_text("PROD_VAR=production\n")
    (tmp_path / ".env.dev").write_text("DEV_VAR=development\n")
    init()
    assert os.environ["BASE_VAR"] == "base"
    assert os.environ["PROD_VAR"] == "production"
    assert "DEV_VAR" not in os.environ


def test_init_with_no_files_succeeds(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    before = dict(os.environ)
    init()
    assert dict(os.environ) == before


@pytest.mark.parametrize("raw", ["staging", "Dev", "invalid"])
def test_invalid_profile_fails_before_reading_files(tmp_path, raw):
    # a malformed .env would raise EnvParseError if it were read
    (tmp_path / ".env").write_text("BAD LINE NO EQUALS\n")
    env = {"APP_ENV": raw, "ENVCASCADE_APP": str(tmp_path)}
    with pytest.raises(InvalidProfile) as exc:
        init(env)
    assert "Invalid APP_ENV" in str(exc.value)
    assert env == {"APP_ENV": raw, "ENVCASCADE_APP": str(tmp_path)}


def test_parse_error_keeps_earlier_files(tmp_path):
    (tmp_path / ".env").write_text("A=1\n")
    (tmp_path / ".env.dev").write_text("BAD LINE NO EQUALS\n")
    env = {"ENVCASCADE_APP": str(tmp_path)}
    with pytest.raises(EnvParseError):
        init(env)
    assert env["A"] == "1"


def test_init_with_explicit_settings(tmp_path):
    (tmp_path / ".env.prod").write_text("A=p\n")
    env = {"DEPLOY": "prod"}
    report = init(env, LoaderSettings(selector_var="DEPLOY", app_root=tmp_path))
    assert env["A"] == "p"
    assert report.profile is Profile.PROD


def test_init_reads_directory_override_from_target(tmp_path):
    (tmp_path / ".env.local").write_text("A=3\n")
    env = {"ENVCASCADE_APP": str(tmp_path)}
    init(env)
    assert env["A"] == "3"


def test_init_reads_cwd_even_when_app_is_exported(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    other = tmp_path / "other"
    other.mkdir()
    (other / ".env").write_text("CWD_VAR=other\n")
    (tmp_path / ".env").write_text("CWD_VAR=1\n")
    monkeypatch.setenv("APP", str(other))
    init()
    assert os.environ["CWD_VAR"] == "1"
