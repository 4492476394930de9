"""Desktop window, Qt render target, and settings dialog."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable

from PySide6.QtCore import QEvent, QObject, Qt, QTimer, Signal, Slot
from PySide6.QtGui import QAction, QColor, QIcon, QImage, QKeySequence, QPainter
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QDialogButtonBox,
    QGridLayout,
    QLabel,
    QMainWindow,
    QMenu,
    QPushButton,
    QSlider,
    QSystemTrayIcon,
    QVBoxLayout,
    QWidget,
)

from wanderspectrum_core import ScrollAnimator, SettingsStore, load_config
from wanderspectrum_core.config import (
    FRAME_RATE_KEY,
    MINIMUM_DIRECTION_SWITCH_SECONDS_KEY,
    PIXEL_SIZE_KEY,
    SCROLL_VELOCITY_KEY,
    SETTING_RANGES,
)
from wanderspectrum_core.logging_setup import get_logger, install_crash_hooks
from wanderspectrum_renderer import RGB


SETTING_LABELS = {
    SCROLL_VELOCITY_KEY: "Scroll velocity",
    PIXEL_SIZE_KEY: "Pixel size",
    FRAME_RATE_KEY: "Frame rate",
    MINIMUM_DIRECTION_SWITCH_SECONDS_KEY: "Minimum direction switch (s)",
}


class QtCanvas:
    def __init__(self, image: QImage) -> None:
        self.image = image
        self.width = image.width()
        self.height = image.height()
        self._painter = QPainter(image)

    def fill(self, color: RGB) -> None:
        self._painter.fillRect(0, 0, self.width, self.height, QColor(*color))

    def fill_rect(self, x: int, y: int, w: int, h: int, color: RGB) -> None:
        self._painter.fillRect(x, y, w, h, QColor(*color))

    def end(self) -> None:
        self._painter.end()


class QtTicker(QObject):
    """Fires the callback on the GUI thread through a QTimer."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._callback: Callable[[], None] | None = None
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._fire)

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.setInterval(interval_ms)
        self._timer.start()
        QTimer.singleShot(0, self._fire)

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()


class SpectrumWidget(QWidget):
    """Render target painted from a QImage back buffer."""

    visibilityChanged = Signal(bool)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent)
        self._frame = QImage()
        self._locked: QtCanvas | None = None

    def lock_surface(self) -> QtCanvas | None:
        if self._locked is not None or not self.isVisible() or self.width() <= 0 or self.height() <= 0:
            return None
        image = QImage(self.width(), self.height(), QImage.Format.Format_RGB32)
        self._locked = QtCanvas(image)
        return self._locked

    def present_and_unlock(self, canvas: QtCanvas) -> None:
        canvas.end()
        self._frame = canvas.image
        self._locked = None
        self.update()

    def paintEvent(self, _event) -> None:
        painter = QPainter(self)
        if self._frame.isNull():
            painter.fillRect(self.rect(), QColor(0, 0, 0))
        else:
            painter.drawImage(0, 0, self._frame)
        painter.end()

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.visibilityChanged.emit(True)

    def hideEvent(self, event) -> None:
        super().hideEvent(event)
        self.visibilityChanged.emit(False)


class SettingsDialog(QDialog):
    def __init__(self, store: SettingsStore, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.store = store
        self.setWindowTitle("WanderSpectrum Settings")
        self._sliders: dict[str, QSlider] = {}

        grid = QGridLayout()
        for row, key in enumerate(SETTING_LABELS):
            low, high = SETTING_RANGES[key]
            slider = QSlider(Qt.Orientation.Horizontal)
            slider.setRange(low, high)
            value_label = QLabel()
            slider.valueChanged.connect(lambda v, label=value_label: label.setText(str(v)))
            slider.setValue(store.get(key))
            value_label.setText(str(slider.value()))
            grid.addWidget(QLabel(SETTING_LABELS[key]), row, 0)
            grid.addWidget(slider, row, 1)
            grid.addWidget(value_label, row, 2)
            self._sliders[key] = slider

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel)
        reset = QPushButton("Reset to defaults")
        buttons.addButton(reset, QDialogButtonBox.ButtonRole.ResetRole)
        buttons.accepted.connect(self.save)
        buttons.rejected.connect(self.reject)
        reset.clicked.connect(self.reset)

        layout = QVBoxLayout(self)
        layout.addLayout(grid)
        layout.addWidget(buttons)

    @Slot()
    def save(self) -> None:
        for key, slider in self._sliders.items():
            self.store.set(key, slider.value())
        get_logger().info("settings saved", extra={"event": "settings_saved"})
        self.accept()

    @Slot()
    def reset(self) -> None:
        defaults = self.store.reset()
        for key, slider in self._sliders.items():
            slider.setValue(defaults[key])
        get_logger().info("settings reset", extra={"event": "settings_reset"})


class WanderSpectrumWindow(QMainWindow):
    def __init__(self, store: SettingsStore) -> None:
        super().__init__()
        self.store = store
        self.setWindowTitle("WanderSpectrum")
        self.surface = SpectrumWidget(self)
        self.setCentralWidget(self.surface)
        self.ticker = QtTicker(self)
        self.animator = ScrollAnimator(self.surface, store, ticker=self.ticker)
        self.surface.visibilityChanged.connect(self._on_visibility_changed)

        settings_action = QAction("Settings…", self)
        settings_action.setShortcut(QKeySequence("S"))
        settings_action.triggered.connect(self.open_settings)
        fullscreen_action = QAction("Toggle Fullscreen", self)
        fullscreen_action.setShortcut(QKeySequence("F"))
        fullscreen_action.triggered.connect(self.toggle_fullscreen)
        self.addAction(settings_action)
        self.addAction(fullscreen_action)
        self.settings_action = settings_action

    @Slot(bool)
    def _on_visibility_changed(self, visible: bool) -> None:
        self.animator.set_visible(visible and not self.isMinimized())

    def changeEvent(self, event) -> None:
        super().changeEvent(event)
        if event.type() == QEvent.Type.WindowStateChange:
            self.animator.set_visible(self.isVisible() and not self.isMinimized())

    @Slot()
    def open_settings(self) -> None:
        dialog = SettingsDialog(self.store, self)
        if dialog.exec() and self.animator.active:
            # Settings apply on the next activation.
            self.animator.set_visible(False)
            self.animator.set_visible(True)

    @Slot()
    def toggle_fullscreen(self) -> None:
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()

    @Slot()
    def toggle_paused(self) -> None:
        self.animator.set_visible(not self.animator.active)

    def shutdown(self) -> None:
        self.animator.set_visible(False)


def run_gui(config_file: Path | None = None) -> int:
    # logging was configured from this file by cli.main
    cfg = load_config(config_file)
    install_crash_hooks()
    logger = get_logger()

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    QApplication.setHighDpiScaleFactorRoundingPolicy(Qt.HighDpiScaleFactorRoundingPolicy.PassThrough)

    app = QApplication(sys.argv)
    app.setApplicationName("WanderSpectrum")

    window = WanderSpectrumWindow(SettingsStore(config_file))
    window.resize(cfg.window.width, cfg.window.height)
    if cfg.window.fullscreen:
        window.showFullScreen()
    else:
        window.show()

    tray = None
    if QSystemTrayIcon.isSystemTrayAvailable():
        icon = QIcon.fromTheme("preferences-desktop-wallpaper")
        tray = QSystemTrayIcon(icon, app)
        tray.setToolTip("WanderSpectrum")
        menu = QMenu()

        pause_action = QAction("Pause / Resume", menu)
        pause_action.triggered.connect(window.toggle_paused)
        menu.addAction(pause_action)

        menu.addAction(window.settings_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(app.quit)
        menu.addAction(quit_action)

        tray.setContextMenu(menu)
        tray.show()

    exit_code = app.exec()
    window.shutdown()
    logger.info("app shutdown", extra={"event": "shutdown", "exit_code": int(exit_code)})
    return int(exit_code)
