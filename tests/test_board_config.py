from bzkanban.core.board_config import load_board_settings
from bzkanban.core.config import AppSettings


def test_defaults_without_yaml(tmp_path):
    settings = load_board_settings(tmp_path, reload=True)
    assert settings == AppSettings()


def test_yaml_overrides(tmp_path):
    (tmp_path / "board.yaml").write_text(
        "board:\n  default_whiteboard_tag: '[fxp]'\n  sort_order: last_changed\n  recent_only: true\n  bogus: 1\n"
    )
    settings = load_board_settings(tmp_path, reload=True)
    assert settings.default_whiteboard_tag == "[fxp]"
    assert settings.sort_order == "last_changed"
    assert settings.recent_only is True
    assert settings.exclude_meta is True


def test_unknown_sort_order_falls_back(tmp_path):
    (tmp_path / "board.yaml").write_text("board:\n  sort_order: random\n")
    assert load_board_settings(tmp_path, reload=True).sort_order == "priority"


def test_malformed_yaml_falls_back(tmp_path):
    (tmp_path / "board.yaml").write_text("board: [unclosed\n")
    assert load_board_settings(tmp_path, reload=True) == AppSettings()
