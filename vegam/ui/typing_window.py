"""Typing test window: routes Qt key events and a one-second timer into the session."""

from __future__ import annotations

import html
import logging
from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from vegam.core.config import TIME_LIMITS, WORD_COUNTS, Mode, SessionConfig, SettingsStore
from vegam.core.results import ResultStore
from vegam.core.session import KeyEvent, Phase, SessionResult, TypingSession
from vegam.ui.colors import TypingColors, char_color, timer_color
from vegam.ui.models import CharState, CharView, build_char_views, normalize_custom_text

logger = logging.getLogger(__name__)

_BLOCKING_MODIFIERS = (
    Qt.KeyboardModifier.ControlModifier
    | Qt.KeyboardModifier.AltModifier
    | Qt.KeyboardModifier.MetaModifier
)


def to_key_event(event: QKeyEvent) -> Optional[KeyEvent]:
    """Translate a Qt key press into a session keystroke, or None to ignore it."""
    if event.modifiers() & _BLOCKING_MODIFIERS:
        return None
    key = event.key()
    if key == Qt.Key.Key_Backspace:
        return KeyEvent.backspace()
    if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
        return KeyEvent.terminator()
    text = event.text()
    if len(text) == 1 and text.isprintable():
        return KeyEvent.character(text)
    return None


def render_html(views: List[CharView]) -> str:
    parts = []
    for view in views:
        ch = html.escape(view.char)
        if view.char == " " and view.state is not CharState.PENDING:
            ch = "&nbsp;"
        style = f"color:{char_color(view.state)};"
        if view.is_cursor:
            style += f"border-bottom:2px solid {TypingColors.PRIMARY};text-decoration:underline;"
        parts.append(f'<span style="{style}">{ch}</span>')
    return "".join(parts)


class TypingWindow(QWidget):
    def __init__(
        self,
        settings: SettingsStore,
        results: ResultStore,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._results = results
        self._session = TypingSession(settings.load())
        self._session.subscribe(self._on_complete)

        self._ticker = QTimer(self)
        self._ticker.setInterval(1000)
        self._ticker.timeout.connect(self._on_tick)

        self.setWindowTitle("Vegam")
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setStyleSheet(
            f"background-color: {TypingColors.BACKGROUND}; color: {TypingColors.TEXT};"
        )
        self._build_ui()
        self._sync_controls()
        self._refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(40, 30, 40, 30)
        layout.setSpacing(20)

        controls = QHBoxLayout()
        self._mode_combo = QComboBox()
        for mode in Mode:
            self._mode_combo.addItem(mode.value, mode.value)
        self._mode_combo.activated.connect(self._on_mode_changed)
        self._param_combo = QComboBox()
        self._param_combo.activated.connect(self._on_param_changed)
        restart = QPushButton("Restart")
        restart.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        restart.clicked.connect(lambda: self._apply_config(self._session.config))
        for w in (self._mode_combo, self._param_combo):
            w.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        controls.addWidget(self._mode_combo)
        controls.addWidget(self._param_combo)
        controls.addStretch(1)
        controls.addWidget(restart)
        layout.addLayout(controls)

        self._timer_label = QLabel()
        self._timer_label.setStyleSheet("font-size: 28px; font-weight: 700;")
        layout.addWidget(self._timer_label)

        self._text_label = QLabel()
        self._text_label.setWordWrap(True)
        self._text_label.setTextFormat(Qt.TextFormat.RichText)
        self._text_label.setStyleSheet(
            f"font-family: monospace; font-size: 26px; padding: 16px;"
            f"background-color: {TypingColors.CONTAINER_BG}; border-radius: 8px;"
        )
        layout.addWidget(self._text_label, 1)

        self._stats_label = QLabel()
        self._stats_label.setStyleSheet(f"font-size: 18px; color: {TypingColors.TEXT_DARK};")
        layout.addWidget(self._stats_label)

        self._notice_label = QLabel()
        self._notice_label.setStyleSheet(f"color: {TypingColors.ERROR};")
        layout.addWidget(self._notice_label)

    def _sync_controls(self) -> None:
        config = self._session.config
        self._mode_combo.setCurrentIndex(self._mode_combo.findData(config.mode.value))
        self._param_combo.clear()
        if config.mode is Mode.TIME:
            for seconds in TIME_LIMITS:
                self._param_combo.addItem(f"{seconds}s", seconds)
            self._param_combo.setCurrentIndex(self._param_combo.findData(config.time_limit))
        elif config.mode is Mode.WORDS:
            for count in WORD_COUNTS:
                self._param_combo.addItem(f"{count} words", count)
            self._param_combo.setCurrentIndex(self._param_combo.findData(config.word_count))
        self._param_combo.setVisible(config.mode in (Mode.TIME, Mode.WORDS))

    def _on_mode_changed(self, index: int) -> None:
        mode = Mode(self._mode_combo.itemData(index))
        config = self._session.config
        custom_text = config.custom_text
        if mode is Mode.CUSTOM:
            text, ok = QInputDialog.getMultiLineText(
                self,
                "Custom text",
                "Text to type (line breaks and tabs become spaces; Enter ends the test):",
                custom_text or "",
            )
            text = normalize_custom_text(text)
            if not ok or not text:
                self._sync_controls()
                return
            custom_text = text
        self._apply_config(
            SessionConfig(
                mode=mode,
                time_limit=config.time_limit,
                word_count=config.word_count,
                custom_text=custom_text,
            )
        )

    def _on_param_changed(self, index: int) -> None:
        value = int(self._param_combo.itemData(index))
        config = self._session.config
        if config.mode is Mode.TIME:
            new = SessionConfig(Mode.TIME, value, config.word_count, config.custom_text)
        else:
            new = SessionConfig(Mode.WORDS, config.time_limit, value, config.custom_text)
        self._apply_config(new)

    def _apply_config(self, config: SessionConfig) -> None:
        logger.debug("Applying config: %s", config)
        self._ticker.stop()
        self._session.reset(config)
        self._settings.save(config)
        self._notice_label.clear()
        self._sync_controls()
        self._refresh()
        self.setFocus()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_Escape:
            self._apply_config(self._session.config)
            return
        key_event = to_key_event(event)
        if key_event is None:
            super().keyPressEvent(event)
            return
        was_idle = self._session.phase is Phase.IDLE
        self._session.handle_keystroke(key_event)
        if was_idle and self._session.phase is Phase.ACTIVE:
            self._ticker.start()
        self._refresh()

    def _on_tick(self) -> None:
        self._session.tick()
        self._refresh()

    def _on_complete(self, result: SessionResult) -> None:
        self._ticker.stop()
        if not self._results.append(result):
            self._notice_label.setText("Result could not be saved. Your score is still shown above.")

    def _refresh(self) -> None:
        snap = self._session.snapshot()
        self._text_label.setText(render_html(build_char_views(snap.target_text, snap.typed_text)))

        if snap.config.mode is Mode.TIME:
            color = timer_color(snap.clock_value, snap.config.time_limit)
        else:
            color = TypingColors.PRIMARY
        self._timer_label.setText(f"{snap.clock_value}s")
        self._timer_label.setStyleSheet(f"font-size: 28px; font-weight: 700; color: {color};")

        result = self._session.result
        if result is not None:
            self._stats_label.setText(
                f"{result.wpm} wpm  |  raw {result.raw_wpm}  |  {result.accuracy}% acc  |  "
                f"{result.consistency}% consistency  |  {result.duration_seconds}s  |  "
                f"{result.error_count} errors  |  {result.cpm} cpm"
            )
        else:
            self._stats_label.setText(
                f"{snap.wpm} wpm  |  {snap.accuracy}% acc  |  "
                f"{snap.character_stats.correct} characters  |  {snap.cpm} cpm"
            )
