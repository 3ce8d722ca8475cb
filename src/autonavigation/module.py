"""
Auto-navigation module lifecycle.

Wires configuration, logging, the handler and the service layer together for
a host application. The host calls startup() once, pre_sync(delta_time) from
its pre-render synchronization phase every frame, and shutdown() on exit.
"""

from typing import Optional

from .config import AutoNavigationConfig
from .handler import AutoNavigationHandler
from .interfaces import CameraSink, SceneQuery
from .logging_setup import module_logger, setup_logging
from .service import NavigationService


logger = module_logger()


class AutoNavigationModule:
    """Host-facing entry point of the engine"""

    def __init__(self, scene: SceneQuery, camera: CameraSink,
                 config: Optional[AutoNavigationConfig] = None):
        self._scene = scene
        self._camera = camera
        self._config = config
        self._handler: Optional[AutoNavigationHandler] = None
        self._service: Optional[NavigationService] = None

    def startup(self) -> None:
        """Called when the host initializes modules"""
        setup_logging('autonavigation')
        if self._config is None:
            self._config = AutoNavigationConfig()

        settings = self._config.to_settings()
        self._handler = AutoNavigationHandler(self._scene, self._camera, settings)
        self._service = NavigationService(self._handler)
        logger.info(f"Auto-navigation started (curve={settings.curve_type.value}, "
                    f"easing={settings.easing.value}, default_duration={settings.default_duration})")

    def pre_sync(self, delta_time: float) -> None:
        """Per-frame hook; advances the player."""
        if self._handler is None:
            return
        self._handler.advance(delta_time)

    def shutdown(self) -> None:
        """Called when the host tears modules down"""
        if self._handler is not None:
            self._handler.clear_path()
        self._handler = None
        self._service = None
        logger.info("Auto-navigation shut down")

    @property
    def config(self) -> Optional[AutoNavigationConfig]:
        return self._config

    @property
    def handler(self) -> AutoNavigationHandler:
        if self._handler is None:
            raise RuntimeError("AutoNavigationModule has not been started")
        return self._handler

    @property
    def service(self) -> NavigationService:
        if self._service is None:
            raise RuntimeError("AutoNavigationModule has not been started")
        return self._service
