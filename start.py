import sys
import logging
from PyQt5.QtWidgets import (QApplication, QWidget, QLabel, QPushButton,
                             QVBoxLayout, QHBoxLayout, QStackedWidget,
                             QGraphicsDropShadowEffect, QFrame, QLineEdit)
from PyQt5.QtGui import QFont, QColor
from PyQt5.QtCore import Qt, QTimer, QPropertyAnimation
from pydantic import ValidationError

from rps_engine import (RoundEngine, Choice, Outcome, Phase, TOTAL_ROUNDS,
                        InvalidNameError, InvalidStateError)
from rps_settings import get_settings

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 49

OUTCOME_COLORS = {
    Outcome.PLAYER_WIN: "#00c853",
    Outcome.COMPUTER_WIN: "#d50000",
    Outcome.DRAW: "#ffab00",
}


class RPSResultFrame(QFrame):
    """Summary card for one round on the results screen."""

    def __init__(self, outcome):
        super().__init__()
        self.outcome = outcome
        color = OUTCOME_COLORS[outcome.result]
        self.setFixedSize(200, 180)
        self.setStyleSheet(f"""
            QFrame {{
                border: 3px solid {color};
                border-radius: 15px;
                background-color: rgba(0, 128, 128, 40);
            }}
            QLabel {{
                border: none;
                background-color: transparent;
            }}
        """)
        self.initUI()
        self.hover_animation = QPropertyAnimation(self, b"geometry")
        self.hover_animation.setDuration(200)
        self.original_geometry = None

    def initUI(self):
        layout = QVBoxLayout()

        round_label = QLabel(f"Round {self.outcome.round_number}")
        round_label.setAlignment(Qt.AlignCenter)
        round_label.setFont(QFont("Arial", 12, QFont.Bold))

        choices_label = QLabel(f"{self.outcome.player_choice.emoji}  vs  "
                               f"{self.outcome.computer_choice.emoji}")
        choices_label.setAlignment(Qt.AlignCenter)
        choices_label.setFont(QFont("Segoe UI Emoji", 28))

        names_label = QLabel(f"{self.outcome.player_choice.label} vs "
                             f"{self.outcome.computer_choice.label}")
        names_label.setAlignment(Qt.AlignCenter)
        names_label.setFont(QFont("Arial", 10))

        result_label = QLabel(self.outcome.result_text)
        result_label.setAlignment(Qt.AlignCenter)
        result_label.setFont(QFont("Segoe UI", 14, QFont.Bold))
        result_label.setStyleSheet(f"color: {OUTCOME_COLORS[self.outcome.result]};")

        layout.addWidget(round_label)
        layout.addWidget(choices_label)
        layout.addWidget(names_label)
        layout.addWidget(result_label)
        layout.setSpacing(8)
        self.setLayout(layout)

    def enterEvent(self, event):
        if self.original_geometry is None:
            self.original_geometry = self.geometry()
        self.hover_animation.setStartValue(self.geometry())
        self.hover_animation.setEndValue(self.original_geometry.adjusted(-5, -5, 5, 5))
        self.hover_animation.start()

    def leaveEvent(self, event):
        if self.original_geometry is None:
            return
        self.hover_animation.setStartValue(self.geometry())
        self.hover_animation.setEndValue(self.original_geometry)
        self.hover_animation.start()


class RockPaperScissorsGame(QWidget):
    def __init__(self, engine=None, settings=None):
        super().__init__()
        self.settings = settings or get_settings()
        self.engine = engine or RoundEngine()
        self.setWindowTitle(self.settings.window_title)
        self.setMinimumSize(640, 560)

        # session the pending results timer belongs to
        self.pending_session = None
        self.results_timer = QTimer(self)
        self.results_timer.setInterval(self.settings.result_delay_ms)
        self.results_timer.setSingleShot(True)
        self.results_timer.timeout.connect(self.show_results)

        self.stacked_widget = QStackedWidget()
        self.main_layout = QVBoxLayout(self)
        self.main_layout.addWidget(self.stacked_widget)

        self.init_start_screen()
        self.init_game_screen()
        self.init_results_screen()

        self.stacked_widget.addWidget(self.start_screen)
        self.stacked_widget.addWidget(self.game_screen)
        self.stacked_widget.addWidget(self.results_screen)
        self.stacked_widget.setCurrentWidget(self.start_screen)

        self.setStyleSheet(self.get_stylesheet())

    def init_start_screen(self):
        start_screen = QWidget()
        self.start_screen = start_screen
        layout = QVBoxLayout()

        layout.addStretch(2)

        title_label = QLabel("🎮 ROCK PAPER SCISSORS")
        title_label.setFont(QFont("Impact", 40, QFont.Bold))
        title_label.setAlignment(Qt.AlignCenter)
        title_label.setStyleSheet("color: #008080; margin-bottom: 0px;")
        layout.addWidget(title_label)

        subtitle_label = QLabel("Welcome!")
        subtitle_label.setFont(QFont("Arial", 24, QFont.Bold))
        subtitle_label.setAlignment(Qt.AlignCenter)
        subtitle_label.setStyleSheet("color: white; margin-bottom: 20px;")
        layout.addWidget(subtitle_label)

        nickname_frame = QFrame()
        nickname_frame.setStyleSheet("""
            QFrame {
                background-color: rgba(0, 0, 0, 50);
                border-radius: 20px;
                padding: 15px;
            }
        """)
        nickname_layout = QVBoxLayout(nickname_frame)
        nickname_label = QLabel("Who dares to challenge the computer?")
        nickname_label.setFont(QFont("Arial", 14))
        nickname_label.setStyleSheet("color: #AAAAAA;")

        self.nickname_input = QLineEdit()
        self.nickname_input.setFont(QFont("Arial", 16))
        self.nickname_input.setPlaceholderText("Enter your warrior name...")
        self.nickname_input.setMaxLength(MAX_NAME_LENGTH)
        self.nickname_input.textChanged.connect(self.check_nickname)
        self.nickname_input.returnPressed.connect(self.start_game)

        nickname_layout.addWidget(nickname_label)
        nickname_layout.addWidget(self.nickname_input)
        layout.addWidget(nickname_frame, alignment=Qt.AlignCenter)

        self.start_button = QPushButton("Let's Battle!")
        self.start_button.setFont(QFont("Arial", 22, QFont.Bold))
        self.start_button.clicked.connect(self.start_game)
        self.add_shadow(self.start_button)
        layout.addWidget(self.start_button, alignment=Qt.AlignCenter)

        self.name_error_label = QLabel("")
        self.name_error_label.setFont(QFont("Arial", 12, QFont.Bold))
        self.name_error_label.setAlignment(Qt.AlignCenter)
        self.name_error_label.setStyleSheet("color: #d50000;")
        self.name_error_label.setVisible(False)
        layout.addWidget(self.name_error_label)

        tip_label = QLabel("💡 Tip: Hey hero... don't forget to tell me who you are!")
        tip_label.setFont(QFont("Arial", 10))
        tip_label.setAlignment(Qt.AlignCenter)
        tip_label.setStyleSheet("color: #888888; margin-top: 15px;")
        layout.addWidget(tip_label)

        layout.addStretch(2)
        start_screen.setLayout(layout)

    def check_nickname(self):
        if self.nickname_input.text().strip():
            self.name_error_label.setVisible(False)

    def init_game_screen(self):
        game_screen = QWidget()
        self.game_screen = game_screen

        main_layout = QVBoxLayout()
        main_layout.setSpacing(15)

        game_title_label = QLabel("🎮 ROCK PAPER SCISSORS")
        game_title_label.setFont(QFont("Impact", 28, QFont.Bold))
        game_title_label.setAlignment(Qt.AlignCenter)
        game_title_label.setStyleSheet("color: #008080;")
        main_layout.addWidget(game_title_label)

        self.round_label = QLabel("Round 1: Fight!")
        self.round_label.setFont(QFont("Arial", 22, QFont.Bold))
        self.round_label.setAlignment(Qt.AlignCenter)
        main_layout.addWidget(self.round_label)

        self.score_label = QLabel("Player: 0  |  Computer: 0")
        self.score_label.setFont(QFont("Arial", 14))
        self.score_label.setAlignment(Qt.AlignCenter)
        self.score_label.setStyleSheet("color: #AAAAAA;")
        main_layout.addWidget(self.score_label)

        self.feedback_label = QLabel("Make your move...")
        self.feedback_label.setFont(QFont("Arial", 16))
        self.feedback_label.setAlignment(Qt.AlignCenter)
        main_layout.addWidget(self.feedback_label)

        self.choices_frame = QFrame()
        choices_layout = QHBoxLayout(self.choices_frame)
        choices_layout.setSpacing(15)
        self.choice_buttons = {}
        for choice in RoundEngine.choices:
            button = self.create_choice_button(choice)
            self.choice_buttons[choice] = button
            choices_layout.addWidget(button)
        main_layout.addWidget(self.choices_frame, alignment=Qt.AlignCenter)

        self.result_label = QLabel("")
        self.result_label.setAlignment(Qt.AlignCenter)
        main_layout.addWidget(self.result_label)

        self.next_round_button = QPushButton("Next Round ->")
        self.next_round_button.setFont(QFont("Arial", 16, QFont.Bold))
        self.next_round_button.clicked.connect(self.next_round)
        self.next_round_button.setVisible(False)
        self.add_shadow(self.next_round_button)
        main_layout.addWidget(self.next_round_button, alignment=Qt.AlignCenter)

        main_layout.addStretch()
        game_screen.setLayout(main_layout)

    def create_choice_button(self, choice):
        button = QPushButton(f"{choice.emoji}\n{choice.value.capitalize()}")
        button.setFont(QFont("Arial", 16, QFont.Bold))
        button.setFixedSize(110, 110)
        button.setStyleSheet("""
            QPushButton {
                background-color: #f8f9fa;
                color: #333333;
                border: 1px solid #dee2e6;
                border-radius: 12px;
                padding: 10px;
            }
            QPushButton:hover {
                background-color: #e9ecef;
                border-color: #adb5bd;
            }
        """)
        button.clicked.connect(lambda: self.play(choice))
        return button

    def init_results_screen(self):
        results_screen = QWidget()
        self.results_screen = results_screen
        layout = QVBoxLayout()
        layout.setSpacing(20)

        title_label = QLabel("Results")
        title_label.setFont(QFont("Impact", 40, QFont.Bold))
        title_label.setAlignment(Qt.AlignCenter)
        title_label.setStyleSheet("color: #008080; margin-bottom: 10px;")
        layout.addWidget(title_label)

        self.rounds_results_container = QHBoxLayout()

        rounds_frame = QFrame()
        rounds_frame.setLayout(self.rounds_results_container)
        rounds_frame.setStyleSheet("background-color: transparent;")
        layout.addWidget(rounds_frame)

        self.final_result_label = QLabel()
        self.final_result_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.final_result_label)

        self.final_score_label = QLabel()
        self.final_score_label.setFont(QFont("Arial", 18, QFont.Bold))
        self.final_score_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.final_score_label)

        buttons_layout = QHBoxLayout()

        self.rematch_button = QPushButton("Rematch?")
        self.rematch_button.setFont(QFont("Arial", 18, QFont.Bold))
        self.rematch_button.clicked.connect(self.restart_game)
        self.add_shadow(self.rematch_button)
        buttons_layout.addWidget(self.rematch_button)

        self.exit_button = QPushButton("End Battle")
        self.exit_button.setFont(QFont("Arial", 18, QFont.Bold))
        self.exit_button.setStyleSheet("""
            QPushButton {
                background-color: #d50000;
                color: white;
                border: none;
                padding: 10px 20px;
                border-radius: 15px;
            }
            QPushButton:hover {
                background-color: #b71c1c;
            }
        """)
        self.exit_button.clicked.connect(self.exit_game)
        self.add_shadow(self.exit_button)
        buttons_layout.addWidget(self.exit_button)

        layout.addLayout(buttons_layout)

        self.credit_label = QLabel("Developed by SUJAY PAUL")
        self.credit_label.setFont(QFont("Arial", 9, QFont.Bold))
        self.credit_label.setAlignment(Qt.AlignCenter)
        self.credit_label.setStyleSheet("color: #888888; margin-top: 5px;")
        layout.addWidget(self.credit_label)
        layout.addStretch()
        results_screen.setLayout(layout)

    def add_shadow(self, widget):
        shadow = QGraphicsDropShadowEffect()
        shadow.setBlurRadius(20)
        shadow.setXOffset(5)
        shadow.setYOffset(5)
        shadow.setColor(QColor(0, 0, 0, 180))
        widget.setGraphicsEffect(shadow)

    def set_outcome_style(self, label, outcome, size=14):
        if outcome is None:
            label.setStyleSheet("")
            return
        label.setStyleSheet(
            f"color: {OUTCOME_COLORS[outcome]}; font-weight: bold; font-size: {size}pt;")

    def render_round(self, snapshot):
        self.round_label.setText(snapshot.round_text)
        self.score_label.setText(snapshot.score_text)
        self.feedback_label.setText(snapshot.feedback_text)
        self.result_label.setText("")
        self.set_outcome_style(self.result_label, None)
        self.choices_frame.setVisible(True)
        self.next_round_button.setVisible(False)

    def render_resolved(self, outcome, snapshot):
        self.score_label.setText(snapshot.score_text)
        self.feedback_label.setText(snapshot.feedback_text)
        self.result_label.setText(snapshot.result_text)
        self.set_outcome_style(self.result_label, outcome.result)
        self.choices_frame.setVisible(False)

    def start_game(self):
        try:
            snapshot = self.engine.start_game(self.nickname_input.text())
        except InvalidNameError:
            self.name_error_label.setText("Hold on! Every hero needs a name!")
            self.name_error_label.setVisible(True)
            return
        except InvalidStateError as e:
            logger.warning(f"Ignoring start request: {e}")
            return

        self.name_error_label.setVisible(False)
        self.render_round(snapshot)
        self.stacked_widget.setCurrentWidget(self.game_screen)

    def play(self, choice):
        try:
            outcome, snapshot = self.engine.submit_move(choice)
        except InvalidStateError as e:
            logger.warning(f"Ignoring move {choice.label}: {e}")
            return

        self.render_resolved(outcome, snapshot)

        if snapshot.current_round < TOTAL_ROUNDS:
            self.next_round_button.setVisible(True)
        else:
            snapshot = self.engine.acknowledge_round()
            self.round_label.setText(snapshot.round_text)
            self.pending_session = self.engine.session
            self.results_timer.start()

    def next_round(self):
        try:
            snapshot = self.engine.acknowledge_round()
        except InvalidStateError as e:
            logger.warning(f"Ignoring next round request: {e}")
            return
        self.render_round(snapshot)

    def show_results(self):
        if self.pending_session != self.engine.session or self.engine.phase != Phase.FINISHED:
            logger.debug("Results timer fired for a stale session, ignoring")
            return
        self.pending_session = None

        snapshot = self.engine.snapshot()
        self.clear_round_results()
        for outcome in snapshot.history:
            self.rounds_results_container.addWidget(RPSResultFrame(outcome))

        self.final_result_label.setText(snapshot.final_outcome_text)
        self.set_outcome_style(self.final_result_label, snapshot.verdict, size=28)
        self.final_score_label.setText(snapshot.final_score_text)
        self.stacked_widget.setCurrentWidget(self.results_screen)

    def clear_round_results(self):
        for i in reversed(range(self.rounds_results_container.count())):
            layout_item = self.rounds_results_container.itemAt(i)
            if layout_item:
                widget = layout_item.widget()
                if widget:
                    widget.setParent(None)
                    widget.deleteLater()

    def restart_game(self):
        self.results_timer.stop()
        self.pending_session = None
        try:
            snapshot = self.engine.rematch()
        except InvalidStateError as e:
            logger.warning(f"Ignoring rematch request: {e}")
            return
        self.clear_round_results()
        self.render_round(snapshot)
        self.stacked_widget.setCurrentWidget(self.game_screen)

    def exit_game(self):
        QApplication.instance().quit()

    def closeEvent(self, event):
        self.results_timer.stop()
        self.pending_session = None
        self.engine.reset()
        event.accept()

    def get_stylesheet(self):
        return """
                        QWidget {
                            background-color: #222222;
                            color: #FFFFFF;
                        }
                        QLabel {
                            color: #FFFFFF;
                        }
                        QPushButton {
                            background-color: qlineargradient(x1: 0, y1: 0, x2: 0, y2: 1,
                                                stop: 0 #008080, stop: 1 #006666);
                            color: white;
                            border: none;
                            padding: 10px 20px;
                            border-radius: 15px;
                            font-size: 18px;
                        }
                        QPushButton:hover {
                            background-color: qlineargradient(x1: 0, y1: 0, x2: 0, y2: 1,
                                                stop: 0 #006666, stop: 1 #004d4d);
                        }
                        QPushButton:pressed {
                            background-color: qlineargradient(x1: 0, y1: 0, x2: 0, y2: 1,
                                                    stop: 0  #004d4d, stop: 1 #003333);
                        }
                        QLineEdit {
                            color: white;
                            background-color: #333333;
                            border: 2px solid #555555;
                            border-radius: 10px;
                            padding: 8px;
                            min-width: 250px;
                            selection-background-color: #008080;
                        }
                        QLineEdit:focus {
                            border: 2px solid #008080;
                        }
                        """


def main():
    try:
        settings = get_settings()
    except ValidationError:
        logging.basicConfig()
        logger.exception("Invalid settings, not starting")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    try:
        game = RockPaperScissorsGame(settings=settings)
        if settings.fullscreen:
            game.showFullScreen()
        else:
            game.show()
        return app.exec_()
    except Exception:
        logger.exception("Unhandled exception in main application")
        return 1


if __name__ == "__main__":
    sys.exit(main())
