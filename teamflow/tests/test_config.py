from teamflow import config


def test_env_path_wins(monkeypatch, tmp_path):
    target = tmp_path / "sub" / "x.sqlite"
    monkeypatch.setenv("TEAMFLOW_DB_PATH", str(target))
    assert config.get_db_path() == str(target)
    assert target.parent.is_dir()


def test_yaml_db_path_and_settings(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "db_path: {prod}\ntest_db_path: {test}\nsearch:\n  case_sensitive: false\n".format(
            prod=tmp_path / "prod.sqlite", test=tmp_path / "test.sqlite"
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("TEAMFLOW_CONFIG", str(cfg))
    monkeypatch.delenv("TEAMFLOW_DB_PATH", raising=False)
    # pytest 运行中 → 使用 test_db_path
    assert config.get_db_path() == str(tmp_path / "test.sqlite")
    assert config.get_settings()["search_case_sensitive"] is False


def test_missing_or_broken_yaml_falls_back(monkeypatch, tmp_path):
    monkeypatch.setenv("TEAMFLOW_CONFIG", str(tmp_path / "absent.yaml"))
    assert config.get_settings()["search_case_sensitive"] is True

    broken = tmp_path / "broken.yaml"
    broken.write_text("search: [unclosed", encoding="utf-8")
    monkeypatch.setenv("TEAMFLOW_CONFIG", str(broken))
    assert config.read_config_yaml() == {}


def test_case_sensitive_string_values(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    monkeypatch.setenv("TEAMFLOW_CONFIG", str(cfg))
    for raw, expected in [('"false"', False), ("'no'", False), ('"TRUE"', True), ("off", False), ("0", False),
                          ('"maybe"', True)]:
        cfg.write_text(f"search:\n  case_sensitive: {raw}\n", encoding="utf-8")
        assert config.get_settings()["search_case_sensitive"] is expected, raw
