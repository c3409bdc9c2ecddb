"""
Round engine for the Rock-Paper-Scissors game.

The engine owns the game state and is the only place that mutates it.
The window in start.py forwards user actions here and renders the
GameSnapshot values that come back.
"""

import enum
import logging
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

TOTAL_ROUNDS = 3


class RPSException(Exception):
    """Base class for all game errors."""
    pass


class InvalidNameError(RPSException):
    """The player name is empty or whitespace only."""

    def __init__(self, name):
        self.name = name
        super().__init__("Player name must not be empty")


class InvalidStateError(RPSException):
    """An operation was called while the engine is in the wrong phase."""

    def __init__(self, operation, phase, expected):
        self.operation = operation
        self.phase = phase
        self.expected = tuple(expected)
        allowed = ", ".join(p.value for p in self.expected)
        super().__init__(
            f"{operation}() is not allowed in phase {phase.value} "
            f"(expected {allowed})"
        )


class Choice(enum.Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    @property
    def label(self) -> str:
        return self.name

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    @staticmethod
    def parse(text: str) -> "Choice":
        if not isinstance(text, str):
            raise ValueError(f"Unknown choice: {text!r}")
        normalized = text.strip().lower()
        for choice in Choice:
            if choice.value == normalized:
                return choice
        raise ValueError(f"Unknown choice: {text!r}")


_EMOJI = {
    Choice.ROCK: "✊",
    Choice.PAPER: "✋",
    Choice.SCISSORS: "✌️",
}

# winner -> loser
BEATS = {
    Choice.ROCK: Choice.SCISSORS,
    Choice.SCISSORS: Choice.PAPER,
    Choice.PAPER: Choice.ROCK,
}


class Outcome(enum.Enum):
    DRAW = "draw"
    PLAYER_WIN = "player_win"
    COMPUTER_WIN = "computer_win"


class Phase(enum.Enum):
    AWAITING_NAME = "awaiting_name"
    ROUND_IN_PROGRESS = "round_in_progress"
    ROUND_RESOLVED = "round_resolved"
    FINISHED = "finished"


def resolve(player: Choice, computer: Choice) -> Outcome:
    """Compare two choices by cyclic dominance."""
    if player == computer:
        return Outcome.DRAW
    if BEATS[player] == computer:
        return Outcome.PLAYER_WIN
    return Outcome.COMPUTER_WIN


def verdict(player_score: int, computer_score: int) -> Outcome:
    if player_score > computer_score:
        return Outcome.PLAYER_WIN
    if computer_score > player_score:
        return Outcome.COMPUTER_WIN
    return Outcome.DRAW


@dataclass(frozen=True)
class RoundOutcome:
    round_number: int
    player_choice: Choice
    computer_choice: Choice
    result: Outcome

    @property
    def result_text(self) -> str:
        return _RESULT_TEXT[self.result]


_RESULT_TEXT = {
    Outcome.DRAW: "It's a Draw.",
    Outcome.PLAYER_WIN: "You Won!",
    Outcome.COMPUTER_WIN: "Computer Won.",
}


@dataclass
class GameState:
    """
    Mutable state of one play session.

    Only RoundEngine writes to it; everyone else gets copies or snapshots.
    """
    player_name: str = ""
    current_round: int = 1
    player_score: int = 0
    computer_score: int = 0
    phase: Phase = Phase.AWAITING_NAME
    history: List[RoundOutcome] = field(default_factory=list)

    @property
    def rounds_played(self) -> int:
        return len(self.history)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the game used for rendering."""
    phase: Phase
    player_name: str
    current_round: int
    player_score: int
    computer_score: int
    history: Tuple[RoundOutcome, ...]
    verdict: Optional[Outcome] = None

    @property
    def last_outcome(self) -> Optional[RoundOutcome]:
        if self.phase in (Phase.ROUND_RESOLVED, Phase.FINISHED) and self.history:
            return self.history[-1]
        return None

    @property
    def round_text(self) -> str:
        if self.phase == Phase.FINISHED:
            return "Calculating Results..."
        return f"Round {self.current_round}: Fight!"

    @property
    def score_text(self) -> str:
        name = self.player_name or "Player"
        return f"{name}: {self.player_score}  |  Computer: {self.computer_score}"

    @property
    def feedback_text(self) -> str:
        outcome = self.last_outcome
        if outcome is None:
            return "Make your move..."
        return (f"You: {outcome.player_choice.label}  vs  "
                f"PC: {outcome.computer_choice.label}")

    @property
    def result_text(self) -> str:
        outcome = self.last_outcome
        return outcome.result_text if outcome else ""

    @property
    def final_outcome_text(self) -> str:
        if self.verdict == Outcome.PLAYER_WIN:
            return f"CHAMPION!\n{self.player_name} wins!"
        if self.verdict == Outcome.COMPUTER_WIN:
            return "DEFEAT!\nThe Computer won."
        if self.verdict == Outcome.DRAW:
            return "DRAW GAME!"
        return ""

    @property
    def final_score_text(self) -> str:
        return f"Final Score: {self.player_score} - {self.computer_score}"


class RoundEngine:
    """
    Three-round Rock-Paper-Scissors state machine.

    AWAITING_NAME -> ROUND_IN_PROGRESS -> ROUND_RESOLVED -> ... -> FINISHED,
    with rematch() going from FINISHED back to round 1 under the same name.
    The engine has no notion of time; pacing is up to the caller.
    """

    choices = (Choice.ROCK, Choice.PAPER, Choice.SCISSORS)

    def __init__(self, rng=None):
        self._rng = rng if rng is not None else random.Random()
        self._state = GameState()
        self._session = 0

    @property
    def state(self) -> GameState:
        s = self._state
        return replace(s, history=list(s.history))

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def session(self) -> int:
        return self._session

    def _require(self, operation, *expected):
        if self._state.phase not in expected:
            raise InvalidStateError(operation, self._state.phase, expected)

    def _transition(self, phase):
        logger.debug(f"Phase {self._state.phase.value} -> {phase.value} "
                     f"(round {self._state.current_round})")
        self._state.phase = phase

    def _new_round_set(self):
        s = self._state
        s.current_round = 1
        s.player_score = 0
        s.computer_score = 0
        s.history = []
        self._session += 1
        self._transition(Phase.ROUND_IN_PROGRESS)

    def snapshot(self) -> GameSnapshot:
        s = self._state
        final = None
        if s.phase == Phase.FINISHED:
            final = verdict(s.player_score, s.computer_score)
        return GameSnapshot(
            phase=s.phase,
            player_name=s.player_name,
            current_round=s.current_round,
            player_score=s.player_score,
            computer_score=s.computer_score,
            history=tuple(s.history),
            verdict=final,
        )

    def start_game(self, name: str) -> GameSnapshot:
        self._require("start_game", Phase.AWAITING_NAME)
        trimmed = (name or "").strip()
        if not trimmed:
            raise InvalidNameError(name)

        self._state.player_name = trimmed
        self._new_round_set()
        logger.info(f"Game started for {trimmed}")
        return self.snapshot()

    def submit_move(self, player_choice: Union[Choice, str]) -> Tuple[RoundOutcome, GameSnapshot]:
        """
        Play the current round.

        The computer draws uniformly from the three choices, independent of
        history. Exactly one score goes up unless the round is a draw.
        """
        self._require("submit_move", Phase.ROUND_IN_PROGRESS)
        if not isinstance(player_choice, Choice):
            player_choice = Choice.parse(player_choice)

        computer_choice = self._rng.choice(self.choices)
        result = resolve(player_choice, computer_choice)

        s = self._state
        if result == Outcome.PLAYER_WIN:
            s.player_score += 1
        elif result == Outcome.COMPUTER_WIN:
            s.computer_score += 1

        outcome = RoundOutcome(
            round_number=s.current_round,
            player_choice=player_choice,
            computer_choice=computer_choice,
            result=result,
        )
        s.history.append(outcome)
        logger.info(
            f"Round {s.current_round}: {player_choice.label} vs "
            f"{computer_choice.label} -> {result.value} "
            f"({s.player_score}-{s.computer_score})"
        )
        self._transition(Phase.ROUND_RESOLVED)
        return outcome, self.snapshot()

    def acknowledge_round(self) -> GameSnapshot:
        self._require("acknowledge_round", Phase.ROUND_RESOLVED)
        if self._state.current_round < TOTAL_ROUNDS:
            self._state.current_round += 1
            self._transition(Phase.ROUND_IN_PROGRESS)
        else:
            self._transition(Phase.FINISHED)
        return self.snapshot()

    def final_verdict(self) -> Outcome:
        self._require("final_verdict", Phase.FINISHED)
        return verdict(self._state.player_score, self._state.computer_score)

    def rematch(self) -> GameSnapshot:
        self._require("rematch", Phase.FINISHED)
        self._new_round_set()
        logger.info(f"Rematch for {self._state.player_name}")
        return self.snapshot()

    def reset(self) -> GameSnapshot:
        """Forget the player and go back to name entry, from any phase."""
        self._state = GameState()
        self._session += 1
        logger.debug("Engine reset to name entry")
        return self.snapshot()
