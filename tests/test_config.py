from mandala.config import coerce_color, load_config


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "data_root: /tmp/data\npaint:\n  line_width: 8\n  fill_color: [1, 2, 3]\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("MANDALA_CONFIG", str(config_path))

    config = load_config()
    assert config["data_root"] == "/tmp/data"
    assert config["paint"]["line_width"] == 8
    assert config["paint"]["fill_color"] == [1, 2, 3]
    assert config["paint"]["palette"]


def test_load_config_ignores_non_mapping_yaml(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("MANDALA_CONFIG", str(config_path))

    config = load_config()
    assert config["paint"]["line_width"] == 5.0
    assert config["paint"]["fill_color"] is None


def test_coerce_color_clamps_and_falls_back():
    assert coerce_color([300, -5, 12], (0, 0, 0)) == (255, 0, 12)
    assert coerce_color(None, (9, 9, 9)) == (9, 9, 9)
    assert coerce_color("red", None) is None
    assert coerce_color([1, 2], (4, 4, 4)) == (4, 4, 4)
