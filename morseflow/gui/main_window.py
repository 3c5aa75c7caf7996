"""Main window for MorseFlow.

A small practice window around :class:`~morseflow.core.engine.PlaybackEngine`:
a text box, speed and frequency fields, Play/Stop buttons, a keying lamp
and the character currently being sent.

The engine runs on a ``QThreadPool`` worker (see :mod:`.async_job`).  Its
callbacks fire on that worker thread, so they are re-emitted as Qt
signals and the widgets are only touched from the GUI thread.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtCore import QObject, QThreadPool, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QApplication,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..config import AppConfig, get_app_config
from ..core.engine import PlaybackEngine
from ..core.symbols import char_to_symbols
from ..core.timing import MAX_FREQUENCY, MIN_FREQUENCY
from ..errors import InvalidSpeedFormat
from .async_job import Job

logger = logging.getLogger(__name__)

_LAMP_ON = "background-color: #e8b400; border-radius: 12px;"
_LAMP_OFF = "background-color: #3a3a3a; border-radius: 12px;"


class EngineSignals(QObject):
    """Qt signals mirroring the engine callbacks."""

    char_started = pyqtSignal(str)
    char_ended = pyqtSignal(str)
    tone = pyqtSignal(bool)


class MainWindow(QMainWindow):
    """Main window for the MorseFlow application."""

    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self.setWindowTitle("MorseFlow")
        self._config = config if config is not None else get_app_config()
        self._engine = PlaybackEngine.from_config(self._config)
        self._signals = EngineSignals()
        self._engine.on_char_start = self._signals.char_started.emit
        self._engine.on_char_end = self._signals.char_ended.emit
        self._engine.on_tone = self._signals.tone.emit
        self._pool = QThreadPool.globalInstance()
        self._build_ui()

        self._signals.char_started.connect(self._on_char_started)
        self._signals.char_ended.connect(self._on_char_ended)
        self._signals.tone.connect(self._on_tone)

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        self.text_edit = QPlainTextEdit(self)
        self.text_edit.setPlaceholderText("Text to send")
        layout.addWidget(self.text_edit)

        form = QFormLayout()
        self.speed_edit = QLineEdit(self._engine.timing.speed_string, self)
        self.speed_edit.setToolTip("cc or cc:oo in WPM")
        form.addRow("Speed (WPM)", self.speed_edit)
        self.frequency_spin = QDoubleSpinBox(self)
        self.frequency_spin.setRange(MIN_FREQUENCY, MAX_FREQUENCY)
        self.frequency_spin.setSuffix(" Hz")
        self.frequency_spin.setValue(self._engine.frequency)
        form.addRow("Frequency", self.frequency_spin)
        layout.addLayout(form)

        status_row = QHBoxLayout()
        self.lamp = QLabel(self)
        self.lamp.setFixedSize(24, 24)
        self.lamp.setStyleSheet(_LAMP_OFF)
        status_row.addWidget(self.lamp)
        self.char_label = QLabel("", self)
        font = QFont()
        font.setPointSize(20)
        self.char_label.setFont(font)
        status_row.addWidget(self.char_label, 1)
        layout.addLayout(status_row)

        buttons = QHBoxLayout()
        self.play_button = QPushButton("Play", self)
        self.play_button.clicked.connect(self._play)
        self.stop_button = QPushButton("Stop", self)
        self.stop_button.clicked.connect(self._engine.stop)
        self.stop_button.setEnabled(False)
        buttons.addWidget(self.play_button)
        buttons.addWidget(self.stop_button)
        layout.addLayout(buttons)

        self.setCentralWidget(central)
        self.statusBar().showMessage("Ready")

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def _play(self) -> None:
        text = self.text_edit.toPlainText().strip()
        if not text:
            self.statusBar().showMessage("Nothing to send.")
            return
        try:
            self._engine.set_speed_from_string(self.speed_edit.text())
        except InvalidSpeedFormat as exc:
            self.statusBar().showMessage(str(exc))
            return
        self._engine.set_frequency(self.frequency_spin.value())

        job = Job(self._engine.play_text, text)
        job.signals.error.connect(self._on_playback_error)
        job.signals.finished.connect(self._on_playback_finished)
        self.play_button.setEnabled(False)
        self.stop_button.setEnabled(True)
        self.statusBar().showMessage(
            f"Sending at {self._engine.timing.speed_string} WPM, "
            f"{self._engine.frequency:.0f} Hz"
        )
        self._pool.start(job)

    def _on_char_started(self, char: str) -> None:
        self.char_label.setText(f"{char}  {char_to_symbols(char)}")

    def _on_char_ended(self, char: str) -> None:
        self.char_label.clear()

    def _on_tone(self, is_on: bool) -> None:
        self.lamp.setStyleSheet(_LAMP_ON if is_on else _LAMP_OFF)

    def _on_playback_finished(self) -> None:
        self.play_button.setEnabled(True)
        self.stop_button.setEnabled(False)
        self.lamp.setStyleSheet(_LAMP_OFF)
        self.statusBar().showMessage("Finished.")

    def _on_playback_error(self, message: str) -> None:
        logger.error("Playback error: %s", message)
        self.statusBar().showMessage(f"Audio error: {message}")

    def closeEvent(self, event) -> None:
        self._engine.stop()
        self._pool.waitForDone(2000)
        self._engine.close()
        super().closeEvent(event)


def run_gui(config: AppConfig | None = None) -> int:
    """Start the Qt application and block until the window is closed."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = MainWindow(config)
    window.show()
    return app.exec()
