import logging

import pytest

from autonavigation import module as module_source
from autonavigation.config import AutoNavigationConfig
from autonavigation.logging_setup import reset_logging
from autonavigation.module import AutoNavigationModule
from autonavigation.state import CurveType


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def module(scene, camera, tmp_path):
    config_file = tmp_path / "autonavigation_config.json"
    config_file.write_text('{"curve_type": "linear", "default_duration": 1.0}')
    return AutoNavigationModule(scene, camera, AutoNavigationConfig(config_file))


def test_handler_and_service_require_startup(module):
    with pytest.raises(RuntimeError):
        module.handler
    with pytest.raises(RuntimeError):
        module.service


def test_pre_sync_before_startup_is_a_noop(module):
    module.pre_sync(0.1)


def test_startup_applies_config(module):
    module.startup()

    assert module.handler.settings.curve_type is CurveType.LINEAR
    assert module.handler.settings.default_duration == 1.0


def test_pre_sync_drives_playback(module, camera):
    module.startup()
    module.service.go_to({"target": "Earth"})

    for _ in range(5):
        module.pre_sync(0.25)

    assert not module.handler.is_playing()
    assert len(camera.poses) == 4


def test_shutdown_clears_path(module):
    module.startup()
    handler = module.handler
    handler.go_to("Moon")

    module.shutdown()

    assert len(handler.path) == 0
    with pytest.raises(RuntimeError):
        module.handler


def test_startup_without_config_uses_defaults(scene, camera, monkeypatch):
    monkeypatch.delenv("AUTONAV_DEFAULT_DURATION", raising=False)
    module = AutoNavigationModule(scene, camera)
    module.startup()
    assert module.config is not None
    assert module.handler.settings.default_duration == 5.0


def test_module_logger_is_named_after_module():
    assert isinstance(module_source.logger, logging.LoggerAdapter)
    assert module_source.logger.logger.name == "autonavigation.module"
