from __future__ import annotations

import textwrap

import pytest

from departure_gauge.config import AppConfig, load_config
from departure_gauge.data.routes_client import ROUTES_API_URL


VALID_YAML = """
routes:
  travel_mode: "WALK"
  timeout_seconds: 5

refresh:
  base_interval_seconds: 60

search:
  default_max_wait_minutes: 15

logging:
  level: "INFO"
  log_dir: "logs/"
"""


def _write_yaml(tmp_path, contents: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(contents))
    return str(path)


def test_load_config_valid(tmp_path, monkeypatch) -> None:
    path = _write_yaml(tmp_path, VALID_YAML)

    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "testkey")
    config = load_config(path)

    assert isinstance(config, AppConfig)
    assert config.routes.api_key == "testkey"
    assert config.routes.api_url == ROUTES_API_URL
    assert config.routes.timeout_seconds == 5
    assert config.routes.travel_mode == "WALK"
    assert config.refresh.base_interval_seconds == 60
    assert config.search.default_max_wait_minutes == 15
    assert config.log.level == "INFO"
    assert config.log.log_dir == "logs/"


def test_load_config_missing_file(tmp_path) -> None:
    missing_path = tmp_path / "does_not_exist.yaml"

    with pytest.raises(ValueError):
        load_config(str(missing_path))


def test_load_config_missing_refresh_section(tmp_path) -> None:
    yaml_text = """
    search:
      default_max_wait_minutes: 15
    logging:
      level: "INFO"
    """
    path = _write_yaml(tmp_path, yaml_text)

    with pytest.raises(ValueError, match="refresh"):
        load_config(path)


def test_load_config_missing_base_interval(tmp_path) -> None:
    yaml_text = """
    refresh: {}
    search:
      default_max_wait_minutes: 15
    logging:
      level: "INFO"
    """
    path = _write_yaml(tmp_path, yaml_text)

    with pytest.raises(ValueError, match="base_interval_seconds"):
        load_config(path)


def test_load_config_wait_budget_out_of_range(tmp_path) -> None:
    yaml_text = """
    refresh:
      base_interval_seconds: 60
    search:
      default_max_wait_minutes: 180
    logging:
      level: "INFO"
    """
    path = _write_yaml(tmp_path, yaml_text)

    with pytest.raises(ValueError, match="default_max_wait_minutes"):
        load_config(path)


def test_load_config_section_not_mapping(tmp_path) -> None:
    yaml_text = """
    refresh: 60
    search:
      default_max_wait_minutes: 15
    logging:
      level: "INFO"
    """
    path = _write_yaml(tmp_path, yaml_text)

    with pytest.raises(ValueError, match="mapping"):
        load_config(path)
