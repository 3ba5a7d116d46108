from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from vpsprep.config.loader import load_config, read_targets, target_hosts


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text))
    return path


def test_load_config_minimal_ok(tmp_path: Path):
    f = _write(tmp_path / "deploy.yml", """
        service: myapp
        servers:
          - 1.2.3.4
        ssh:
          user: deploy
    """)
    cfg = load_config(f)
    assert cfg.service == "myapp"
    assert cfg.ssh.user == "deploy"
    assert target_hosts(cfg) == ["1.2.3.4"]


def test_roles_and_accessories_are_deduplicated_in_order(tmp_path: Path):
    f = _write(tmp_path / "deploy.yml", """
        servers:
          web:
            hosts:
              - 1.2.3.4
              - 5.6.7.8
          job:
            - 5.6.7.8
        accessories:
          db:
            host: 1.2.3.4
          redis:
            hosts:
              - 9.9.9.9
              - 5.6.7.8
        ssh:
          user: deploy
    """)
    hosts, user = read_targets(f)
    assert hosts == ["1.2.3.4", "5.6.7.8", "9.9.9.9"]
    assert user == "deploy"


def test_accessories_only(tmp_path: Path):
    f = _write(tmp_path / "deploy.yml", """
        accessories:
          db:
            host: 10.0.0.5
        ssh:
          user: app
    """)
    assert read_targets(f) == (["10.0.0.5"], "app")


def test_env_vars_are_expanded(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("WEB_HOST", "203.0.113.7")
    f = _write(tmp_path / "deploy.yml", """
        servers:
          - ${WEB_HOST}
        ssh:
          user: deploy
    """)
    hosts, _ = read_targets(f)
    assert hosts == ["203.0.113.7"]


def test_destination_overlay_is_merged(tmp_path: Path):
    base = _write(tmp_path / "deploy.yml", """
        servers:
          web:
            - 1.2.3.4
        ssh:
          user: deploy
    """)
    _write(tmp_path / "deploy.staging.yml", """
        servers:
          web:
            - 10.1.1.1
        accessories:
          db:
            host: 10.1.1.2
    """)
    hosts, user = read_targets(base, destination="staging")
    assert hosts == ["10.1.1.1", "10.1.1.2"]
    assert user == "deploy"


def test_missing_destination_file_fails(tmp_path: Path):
    base = _write(tmp_path / "deploy.yml", """
        servers: [1.2.3.4]
        ssh:
          user: deploy
    """)
    with pytest.raises(FileNotFoundError):
        load_config(base, destination="production")


def test_missing_file_fails(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yml")


def test_missing_ssh_user_fails(tmp_path: Path):
    f = _write(tmp_path / "deploy.yml", """
        servers: [1.2.3.4]
    """)
    with pytest.raises(ValidationError):
        load_config(f)
