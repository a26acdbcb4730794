import sys
import types
from pathlib import Path

import pytest

from measurelabel import main as entry


@pytest.fixture
def fake_app(monkeypatch):
    created = []

    class FakeApp:
        def __init__(self, config):
            self.config = config
            self.opened = []
            created.append(self)

        def open_image(self, path):
            self.opened.append(path)

        def run(self):
            self.ran = True

    fake_module = types.ModuleType("measurelabel.gui.main_window")
    fake_module.MeasureLabelApp = FakeApp
    monkeypatch.setitem(sys.modules, "measurelabel.gui.main_window", fake_module)
    monkeypatch.setattr(entry, "load_config", lambda path: {
        'log_level': 'INFO', 'log_file': None, 'debug': False, 'smart_sizing': True,
    })
    monkeypatch.setattr(entry, "setup_logging", lambda **kwargs: None)
    return created


def test_main_runs_application(fake_app):
    assert entry.main([]) == 0
    app = fake_app[0]
    assert app.ran
    assert app.opened == []
    assert app.config['smart_sizing'] is True


def test_command_line_overrides(fake_app):
    assert entry.main(['--log-level', 'debug', '--fixed-size', 'cells.tif']) == 0
    app = fake_app[0]
    assert app.config['log_level'] == 'DEBUG'
    assert app.config['smart_sizing'] is False
    assert app.opened == [Path('cells.tif')]


def test_config_path_is_passed_to_loader(monkeypatch, fake_app):
    seen = []
    monkeypatch.setattr(entry, "load_config", lambda path: seen.append(path) or {
        'log_level': 'INFO', 'log_file': None,
    })
    entry.main(['--config', 'site.env'])
    assert seen == [Path('site.env')]


def test_bad_arguments_exit_with_usage_error():
    with pytest.raises(SystemExit) as exit_info:
        entry.main(['--log-level', 'LOUD'])
    assert exit_info.value.code == 2


def test_main_reports_startup_failure(monkeypatch):
    def broken(path):
        raise RuntimeError("bad config")

    monkeypatch.setattr(entry, "load_config", broken)
    assert entry.main([]) == 1
