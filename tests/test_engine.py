import random
from collections import Counter

import pytest

from rps_engine import (RoundEngine, Choice, Outcome, Phase, TOTAL_ROUNDS,
                        InvalidNameError, InvalidStateError, RPSException,
                        resolve, verdict)

R, P, S = Choice.ROCK, Choice.PAPER, Choice.SCISSORS


@pytest.mark.parametrize("player, computer, expected", [
    (R, S, Outcome.PLAYER_WIN),
    (S, P, Outcome.PLAYER_WIN),
    (P, R, Outcome.PLAYER_WIN),
    (S, R, Outcome.COMPUTER_WIN),
    (P, S, Outcome.COMPUTER_WIN),
    (R, P, Outcome.COMPUTER_WIN),
    (R, R, Outcome.DRAW),
    (P, P, Outcome.DRAW),
    (S, S, Outcome.DRAW),
])
def test_resolve_table(player, computer, expected):
    assert resolve(player, computer) == expected


@pytest.mark.parametrize("player, computer, expected", [
    (R, S, Outcome.PLAYER_WIN),
    (R, P, Outcome.COMPUTER_WIN),
    (P, P, Outcome.DRAW),
])
def test_submit_move_uses_forced_draw(engine, rng, player, computer, expected):
    engine.start_game("Ava")
    rng.push(computer)
    outcome, snapshot = engine.submit_move(player)

    assert outcome.result == expected
    assert outcome.player_choice == player
    assert outcome.computer_choice == computer
    assert snapshot.phase == Phase.ROUND_RESOLVED
    assert snapshot.player_score == (1 if expected == Outcome.PLAYER_WIN else 0)
    assert snapshot.computer_score == (1 if expected == Outcome.COMPUTER_WIN else 0)


def test_submit_move_accepts_choice_names(engine, rng):
    engine.start_game("Ava")
    rng.push(S)
    outcome, _ = engine.submit_move(" Rock ")
    assert outcome.player_choice == R


def test_choice_parse_rejects_unknown():
    with pytest.raises(ValueError):
        Choice.parse("lizard")


@pytest.mark.parametrize("value", [42, None, 1.5, ["rock"]])
def test_choice_parse_rejects_non_strings(value):
    with pytest.raises(ValueError):
        Choice.parse(value)


def test_submit_move_with_bad_value_leaves_round_open(engine):
    engine.start_game("Ava")
    before = engine.state
    with pytest.raises(ValueError):
        engine.submit_move(42)
    assert engine.state == before
    assert engine.phase == Phase.ROUND_IN_PROGRESS


def test_initial_state(engine):
    assert engine.phase == Phase.AWAITING_NAME
    assert engine.state.player_name == ""
    assert engine.snapshot().score_text == "Player: 0  |  Computer: 0"


@pytest.mark.parametrize("name", ["", "   ", "\t\n", None])
def test_start_game_rejects_blank_names(engine, name):
    with pytest.raises(InvalidNameError):
        engine.start_game(name)
    assert engine.phase == Phase.AWAITING_NAME
    assert engine.state.player_name == ""


def test_start_game_trims_name(engine):
    snapshot = engine.start_game("  Ava  ")
    assert snapshot.player_name == "Ava"
    assert snapshot.phase == Phase.ROUND_IN_PROGRESS
    assert (snapshot.current_round, snapshot.player_score, snapshot.computer_score) == (1, 0, 0)


def test_start_game_keeps_long_names(engine):
    name = "x" * 200
    assert engine.start_game(name).player_name == name


def test_start_game_twice_is_a_state_error(engine):
    engine.start_game("Ava")
    with pytest.raises(InvalidStateError):
        engine.start_game("Bob")
    assert engine.state.player_name == "Ava"


def _play_to(engine, rng, phase):
    if phase == Phase.AWAITING_NAME:
        return
    engine.start_game("Ava")
    if phase == Phase.ROUND_RESOLVED:
        rng.push(R)
        engine.submit_move(R)
    elif phase == Phase.FINISHED:
        for _ in range(TOTAL_ROUNDS):
            rng.push(S)
            engine.submit_move(R)
            engine.acknowledge_round()


@pytest.mark.parametrize("phase", [Phase.AWAITING_NAME, Phase.ROUND_RESOLVED, Phase.FINISHED])
def test_submit_move_outside_round_is_rejected(engine, rng, phase):
    _play_to(engine, rng, phase)
    before = engine.state

    with pytest.raises(InvalidStateError) as exc_info:
        engine.submit_move(P)

    after = engine.state
    assert after == before
    assert exc_info.value.operation == "submit_move"
    assert exc_info.value.phase == phase
    assert isinstance(exc_info.value, RPSException)


ALLOWED_PHASE = {
    "acknowledge_round": Phase.ROUND_RESOLVED,
    "final_verdict": Phase.FINISHED,
    "rematch": Phase.FINISHED,
}


@pytest.mark.parametrize("operation, allowed, phase", [
    (operation, allowed, phase)
    for operation, allowed in ALLOWED_PHASE.items()
    for phase in Phase
    if phase != allowed
])
def test_operation_outside_its_phase_is_rejected(engine, rng, operation, allowed, phase):
    _play_to(engine, rng, phase)
    before = engine.state

    with pytest.raises(InvalidStateError) as exc_info:
        getattr(engine, operation)()

    assert engine.state == before
    assert engine.phase == phase
    assert exc_info.value.operation == operation
    assert exc_info.value.expected == (allowed,)


def test_finished_is_terminal_until_rematch(engine, rng):
    _play_to(engine, rng, Phase.FINISHED)
    session = engine.session

    with pytest.raises(InvalidStateError):
        engine.acknowledge_round()

    assert engine.phase == Phase.FINISHED
    assert engine.state.current_round == TOTAL_ROUNDS
    assert engine.session == session


def test_rounds_played_invariant():
    engine = RoundEngine(rng=random.Random(7))
    player_rng = random.Random(11)
    engine.start_game("Ava")
    for expected_round in range(1, TOTAL_ROUNDS + 1):
        state = engine.state
        assert state.phase == Phase.ROUND_IN_PROGRESS
        assert state.current_round == expected_round
        assert state.rounds_played == expected_round - 1
        assert state.player_score + state.computer_score <= state.rounds_played

        engine.submit_move(player_rng.choice(RoundEngine.choices))
        engine.acknowledge_round()

    state = engine.state
    assert state.phase == Phase.FINISHED
    assert state.rounds_played == TOTAL_ROUNDS
    assert state.current_round == TOTAL_ROUNDS
    assert state.player_score + state.computer_score <= TOTAL_ROUNDS


def test_full_game_scenario(engine, rng):
    engine.start_game("Ava")

    rng.push(S)
    outcome, snapshot = engine.submit_move(R)
    assert outcome.result == Outcome.PLAYER_WIN
    assert (snapshot.player_score, snapshot.computer_score) == (1, 0)
    assert snapshot.phase == Phase.ROUND_RESOLVED
    snapshot = engine.acknowledge_round()
    assert snapshot.current_round == 2
    assert snapshot.phase == Phase.ROUND_IN_PROGRESS

    rng.push(R)
    outcome, snapshot = engine.submit_move(P)
    assert outcome.result == Outcome.PLAYER_WIN
    assert (snapshot.player_score, snapshot.computer_score) == (2, 0)
    snapshot = engine.acknowledge_round()
    assert snapshot.current_round == 3

    rng.push(R)
    outcome, snapshot = engine.submit_move(S)
    assert outcome.result == Outcome.COMPUTER_WIN
    assert (snapshot.player_score, snapshot.computer_score) == (2, 1)
    snapshot = engine.acknowledge_round()
    assert snapshot.phase == Phase.FINISHED

    assert engine.final_verdict() == Outcome.PLAYER_WIN
    assert snapshot.verdict == Outcome.PLAYER_WIN
    assert snapshot.final_outcome_text == "CHAMPION!\nAva wins!"
    assert snapshot.final_score_text == "Final Score: 2 - 1"
    assert [o.round_number for o in snapshot.history] == [1, 2, 3]


def test_final_verdict_is_a_pure_read(engine, rng):
    _play_to(engine, rng, Phase.FINISHED)
    before = engine.state
    assert engine.final_verdict() == engine.final_verdict()
    assert engine.state == before


def test_rematch_resets_scores_and_keeps_name(engine, rng):
    _play_to(engine, rng, Phase.FINISHED)
    session = engine.session

    snapshot = engine.rematch()

    assert snapshot.phase == Phase.ROUND_IN_PROGRESS
    assert snapshot.player_name == "Ava"
    assert (snapshot.current_round, snapshot.player_score, snapshot.computer_score) == (1, 0, 0)
    assert snapshot.history == ()
    assert engine.session > session


def test_reset_returns_to_name_entry(engine, rng):
    _play_to(engine, rng, Phase.ROUND_RESOLVED)
    session = engine.session

    snapshot = engine.reset()

    assert snapshot.phase == Phase.AWAITING_NAME
    assert snapshot.player_name == ""
    assert engine.session > session
    engine.start_game("Bob")
    assert engine.state.player_name == "Bob"


def test_state_is_a_copy(engine, rng):
    engine.start_game("Ava")
    state = engine.state
    state.player_score = 99
    state.history.append("junk")
    assert engine.state.player_score == 0
    assert engine.state.history == []


@pytest.mark.parametrize("player, computer, expected", [
    (2, 1, Outcome.PLAYER_WIN),
    (0, 3, Outcome.COMPUTER_WIN),
    (1, 1, Outcome.DRAW),
    (0, 0, Outcome.DRAW),
])
def test_verdict(player, computer, expected):
    assert verdict(player, computer) == expected


def test_snapshot_texts_during_round(engine, rng):
    snapshot = engine.start_game("Ava")
    assert snapshot.round_text == "Round 1: Fight!"
    assert snapshot.feedback_text == "Make your move..."
    assert snapshot.result_text == ""
    assert snapshot.last_outcome is None

    rng.push(R)
    _, snapshot = engine.submit_move(R)
    assert snapshot.feedback_text == "You: ROCK  vs  PC: ROCK"
    assert snapshot.result_text == "It's a Draw."
    assert snapshot.score_text == "Ava: 0  |  Computer: 0"


def test_snapshot_texts_when_finished(engine, rng):
    engine.start_game("Ava")
    for _ in range(TOTAL_ROUNDS):
        rng.push(P)
        engine.submit_move(R)
        snapshot = engine.acknowledge_round()
    assert snapshot.round_text == "Calculating Results..."
    assert snapshot.final_outcome_text == "DEFEAT!\nThe Computer won."
    assert snapshot.final_score_text == "Final Score: 0 - 3"


def test_draw_game_text(engine, rng):
    engine.start_game("Ava")
    for _ in range(TOTAL_ROUNDS):
        rng.push(S)
        engine.submit_move(S)
        snapshot = engine.acknowledge_round()
    assert snapshot.verdict == Outcome.DRAW
    assert snapshot.final_outcome_text == "DRAW GAME!"


def test_computer_draw_is_uniform():
    engine = RoundEngine(rng=random.Random(1234))
    engine.start_game("Ava")
    counts = Counter()
    trials = 6000
    for _ in range(trials):
        outcome, _ = engine.submit_move(R)
        counts[outcome.computer_choice] += 1
        if engine.acknowledge_round().phase == Phase.FINISHED:
            engine.rematch()

    assert set(counts) == set(RoundEngine.choices)
    for choice in RoundEngine.choices:
        assert abs(counts[choice] / trials - 1 / 3) < 0.03
