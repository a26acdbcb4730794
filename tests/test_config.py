from pathlib import Path

import pytest

from measurelabel.utils.config import ensure_directories, load_config

CONFIG_VARS = [
    'DEBUG', 'LOG_LEVEL', 'LOG_FILE', 'THEME', 'DEFAULT_WINDOW_SIZE', 'CUSTOMTKINTER_THEME',
    'EXPORT_DIR', 'EXPORT_DPI', 'SMART_DEFAULT_SIZE', 'SCALE_LINE_WIDTH', 'SCALE_FONT',
    'DEFAULT_LINE_WIDTH', 'DEFAULT_FONT_SIZE', 'DEFAULT_LINE_COLOR', 'DEFAULT_TEXT_COLOR',
    'DEFAULT_TEXT_LOCATION', 'LENGTH_DIGITS', 'SAVE_TO_OVERLAY', 'LABEL_FONT_FAMILY',
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so monkeypatch restores (unsets) whatever load_dotenv adds
    for name in CONFIG_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults(clean_env):
    config = load_config(clean_env / "missing.env")

    assert config['log_level'] == 'INFO'
    assert config['log_file'] is None
    assert config['debug'] is False
    assert config['smart_sizing'] is True
    assert config['scale_line_width'] == 200
    assert config['scale_font'] == 35
    assert config['line_width'] == 3
    assert config['font_size'] == 72
    assert config['line_color'] == 'white'
    assert config['text_color'] == 'white'
    assert config['text_location'] == 'center'
    assert config['length_digits'] == 1
    assert config['save_to_overlay'] is True
    assert config['font_family'] == 'Serif'
    assert config['export_dir'] == Path('./exports')


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv('SMART_DEFAULT_SIZE', 'false')
    monkeypatch.setenv('DEFAULT_TEXT_LOCATION', 'bottom')
    monkeypatch.setenv('LENGTH_DIGITS', '3')
    monkeypatch.setenv('SAVE_TO_OVERLAY', '0')
    monkeypatch.setenv('LOG_FILE', 'logs/measure.log')

    config = load_config(clean_env / "missing.env")
    assert config['smart_sizing'] is False
    assert config['text_location'] == 'bottom'
    assert config['length_digits'] == 3
    assert config['save_to_overlay'] is False
    assert config['log_file'] == Path('logs/measure.log')


def test_dotenv_file(clean_env):
    env_file = clean_env / "measurelabel.env"
    env_file.write_text("DEFAULT_LINE_COLOR=yellow\nDEFAULT_FONT_SIZE=48\nEXPORT_DPI=300\n")

    config = load_config(env_file)
    assert config['line_color'] == 'yellow'
    assert config['font_size'] == 48
    assert config['export_dpi'] == 300


def test_ensure_directories(clean_env):
    config = {'export_dir': clean_env / "exports" / "today"}
    ensure_directories(config)
    assert config['export_dir'].is_dir()
