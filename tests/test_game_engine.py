import pytest

from davinci.deck import BLACK, WHITE, Card
from davinci.errors import (
    CannotGuessSelf, CardAlreadyRevealed, DistributionError, ErrorKind,
    IllegalPhaseTransition, InvalidGuessValue, InvalidPenaltySelection,
    InvalidTarget, MustDrawFirst, NoCardsOfColor,
)
from davinci.game_engine import GameEngine
from davinci.game_state import Phase

from conftest import assert_card_conservation, assert_hands_sorted, keys, parse_cards

HANDS = ["B1 W4 B8 W10", "B2 W5 B7 W11"]
DECK = "B0 W0 B3 W3"


def revealed_flags(engine):
    return [[c.revealed for c in p.hand] for p in engine.game.players]


def drawn_engine(rigged_engine, color=BLACK, hands=HANDS, deck=DECK):
    engine = rigged_engine(hands, deck)
    engine.draw()
    engine.choose_draw_color(color)
    return engine


# ---------------------
# LIFECYCLE
# ---------------------

def test_start_game_deals_and_waits_for_first_draw():
    engine = GameEngine(seed=3)
    engine.start_game(2)

    game = engine.game
    assert game.phase == Phase.AWAITING_DRAW
    assert game.current_player_index == 0
    assert len(game.deck) == 16
    assert [p.name for p in game.players] == ["Player 1", "Player 2"]
    assert "Player 1's turn" in game.message
    assert_card_conservation(game)


def test_start_game_uses_given_names():
    engine = GameEngine(seed=3)
    engine.start_game(3, ["Ada", "", "Leo"])
    assert [p.name for p in engine.game.players] == ["Ada", "Player 2", "Leo"]
    assert [p.id for p in engine.game.players] == [0, 1, 2]


@pytest.mark.parametrize("count", [1, 5])
def test_start_game_rejects_bad_player_count(count):
    engine = GameEngine(seed=3)
    with pytest.raises(DistributionError):
        engine.start_game(count)
    assert engine.game is None


def test_commands_before_start_are_illegal():
    engine = GameEngine(seed=3)
    with pytest.raises(IllegalPhaseTransition):
        engine.draw()
    with pytest.raises(IllegalPhaseTransition):
        engine.end_turn()
    assert engine.get_public_state()['started'] is False


def test_same_seed_same_game():
    first = GameEngine(seed=42)
    second = GameEngine(seed=42)
    first.start_game(3)
    second.start_game(3)
    assert first.get_public_state() == second.get_public_state()
    assert keys(first.game.deck) == keys(second.game.deck)


def test_reset_keeps_player_count_and_names(new_engine):
    engine = new_engine(players=3, names=["Ada", "Bo", "Cy"])
    engine.draw()

    engine.reset_game()

    game = engine.game
    assert game.player_count == 3
    assert [p.name for p in game.players] == ["Ada", "Bo", "Cy"]
    assert game.phase == Phase.AWAITING_DRAW
    assert game.current_player_index == 0
    assert len(game.deck) == 12
    assert_card_conservation(game)


def test_reset_with_new_player_count(new_engine):
    engine = new_engine(players=2)
    engine.reset_game(4)
    assert engine.game.player_count == 4
    assert all(len(p.hand) == 3 for p in engine.game.players)


def test_reset_without_a_game_uses_default_count():
    engine = GameEngine(seed=1)
    engine.reset_game()
    assert engine.game.player_count == 3


# ---------------------
# DRAW PHASE
# ---------------------

def test_draw_with_both_colors_asks_for_a_color(rigged_engine):
    engine = rigged_engine(HANDS, DECK)
    result = engine.draw()

    assert result['choose_color'] is True
    assert engine.game.phase == Phase.AWAITING_COLOR_CHOICE
    assert len(engine.game.deck) == 4
    assert engine.game.current_player.drawn_card is None


@pytest.mark.parametrize("color", [BLACK, WHITE])
def test_choose_draw_color_draws_that_color(rigged_engine, color):
    engine = rigged_engine(HANDS, DECK)
    engine.draw()
    result = engine.choose_draw_color(color)

    drawn = engine.game.current_player.drawn_card
    assert drawn.color == color
    assert result['drawn'] == drawn.to_dict()
    assert result['forced'] is False
    assert drawn not in engine.game.deck
    assert len(engine.game.deck) == 3
    assert engine.game.phase == Phase.AWAITING_GUESS_OR_END_TURN
    assert_card_conservation(engine.game, parse_cards(" ".join(HANDS) + " " + DECK))


@pytest.mark.parametrize("seed", range(5))
def test_draw_with_single_color_is_forced(rigged_engine, seed):
    engine = rigged_engine(HANDS, "B0 B3 B6", seed=seed)
    result = engine.draw()

    assert result['forced'] is True
    assert engine.game.current_player.drawn_card.color == BLACK
    assert engine.game.phase == Phase.AWAITING_GUESS_OR_END_TURN
    assert len(engine.game.deck) == 2


def test_choose_missing_color_raises_and_keeps_state(rigged_engine):
    engine = rigged_engine(HANDS, DECK)
    engine.draw()
    # a stale choice: the white cards vanished after the prompt
    engine.game.deck = [c for c in engine.game.deck if c.color == BLACK]
    before = engine.get_public_state()

    with pytest.raises(NoCardsOfColor):
        engine.choose_draw_color(WHITE)
    with pytest.raises(NoCardsOfColor):
        engine.choose_draw_color("red")

    assert engine.get_public_state() == before
    assert engine.game.phase == Phase.AWAITING_COLOR_CHOICE


def test_draw_on_empty_deck_is_a_no_op(rigged_engine):
    engine = rigged_engine(HANDS, "")
    result = engine.draw()

    assert result['deck_empty'] is True
    assert engine.game.phase == Phase.AWAITING_DRAW
    assert engine.game.current_player.drawn_card is None
    assert "empty" in engine.game.message


def test_cannot_draw_twice(rigged_engine):
    engine = drawn_engine(rigged_engine)
    with pytest.raises(IllegalPhaseTransition):
        engine.draw()


def test_choose_color_outside_color_phase_is_illegal(rigged_engine):
    engine = rigged_engine(HANDS, DECK)
    with pytest.raises(IllegalPhaseTransition):
        engine.choose_draw_color(BLACK)


# ---------------------
# GUESS PHASE
# ---------------------

@pytest.mark.parametrize("phase", list(Phase))
def test_guessing_own_card_is_always_rejected(rigged_engine, phase):
    engine = rigged_engine(HANDS, DECK, phase=phase)
    with pytest.raises(CannotGuessSelf) as excinfo:
        engine.select_guess_target(0, 1)
    assert excinfo.value.kind == ErrorKind.CANNOT_GUESS_SELF
    assert engine.game.phase == phase


def test_must_draw_before_guessing(rigged_engine):
    engine = rigged_engine(HANDS, DECK)
    with pytest.raises(MustDrawFirst):
        engine.select_guess_target(1, 0)
    with pytest.raises(MustDrawFirst):
        engine.begin_guess()
    assert engine.game.phase == Phase.AWAITING_DRAW


def test_empty_deck_allows_guessing_without_drawing(rigged_engine):
    engine = rigged_engine(HANDS, "")
    engine.select_guess_target(1, 0)
    assert engine.game.phase == Phase.AWAITING_GUESS_VALUE
    assert engine.game.guess_player_id == 1
    assert engine.game.guess_card_index == 0


def test_begin_guess_then_pick_target(rigged_engine):
    engine = drawn_engine(rigged_engine)
    engine.begin_guess()
    assert engine.game.phase == Phase.AWAITING_GUESS_TARGET

    with pytest.raises(IllegalPhaseTransition):
        engine.end_turn()

    engine.select_guess_target(1, 3)
    assert engine.game.phase == Phase.AWAITING_GUESS_VALUE


def test_cannot_target_revealed_card(rigged_engine):
    engine = drawn_engine(rigged_engine, hands=["B1 W4", "B2* W5"])
    with pytest.raises(CardAlreadyRevealed):
        engine.select_guess_target(1, 0)
    assert engine.game.phase == Phase.AWAITING_GUESS_OR_END_TURN


@pytest.mark.parametrize("player_id, card_index", [(1, 4), (1, -1), (7, 0)])
def test_invalid_target_is_rejected(rigged_engine, player_id, card_index):
    engine = drawn_engine(rigged_engine)
    with pytest.raises(InvalidTarget):
        engine.select_guess_target(player_id, card_index)


def test_retarget_while_entering_value(rigged_engine):
    engine = drawn_engine(rigged_engine)
    engine.select_guess_target(1, 0)
    engine.select_guess_target(1, 2)
    assert engine.game.guess_card_index == 2
    assert engine.game.phase == Phase.AWAITING_GUESS_VALUE


def test_correct_guess_reveals_only_the_target(rigged_engine):
    engine = drawn_engine(rigged_engine)
    before = revealed_flags(engine)

    engine.select_guess_target(1, 2)
    result = engine.submit_guess(7)

    assert result['correct'] is True
    after = revealed_flags(engine)
    before[1][2] = True
    assert after == before
    target = engine.game.players[1].hand[2]
    assert (target.color, target.value) == (BLACK, 7)
    assert engine.game.phase == Phase.AWAITING_GUESS_OR_END_TURN
    assert engine.game.current_player.drawn_card is not None
    assert engine.game.guess_player_id is None
    assert_hands_sorted(engine.game)


def test_correct_guesses_can_be_chained(rigged_engine):
    engine = drawn_engine(rigged_engine)
    engine.select_guess_target(1, 0)
    engine.submit_guess(2)
    engine.select_guess_target(1, 1)
    engine.submit_guess(5)
    engine.begin_guess()
    engine.select_guess_target(1, 3)
    engine.submit_guess(11)

    assert revealed_flags(engine)[1] == [True, True, False, True]
    assert engine.game.current_player_index == 0


def test_incorrect_guess_changes_no_card(rigged_engine):
    engine = drawn_engine(rigged_engine)
    before = revealed_flags(engine)

    engine.select_guess_target(1, 2)
    result = engine.submit_guess(6)

    assert result == {'correct': False, 'penalty': True}
    assert revealed_flags(engine) == before
    assert engine.game.phase == Phase.AWAITING_PENALTY_CARD_CHOICE
    assert engine.game.guess_player_id is None
    assert "guessed 6" in engine.game.action_history[-1]


@pytest.mark.parametrize("value", [12, -1, True, "5", None])
def test_invalid_guess_value_is_rejected(rigged_engine, value):
    engine = drawn_engine(rigged_engine)
    engine.select_guess_target(1, 2)
    before = engine.get_public_state()

    with pytest.raises(InvalidGuessValue):
        engine.submit_guess(value)

    assert engine.get_public_state() == before


def test_cancel_guess_restores_guess_or_end_phase(rigged_engine):
    engine = drawn_engine(rigged_engine)
    players_before = engine.get_public_state()['players']
    engine.select_guess_target(1, 2)

    engine.cancel_guess()

    assert engine.game.phase == Phase.AWAITING_GUESS_OR_END_TURN
    assert engine.game.guess_player_id is None
    assert engine.game.guess_card_index is None
    assert engine.get_public_state()['players'] == players_before


def test_cancel_without_guess_is_illegal(rigged_engine):
    engine = drawn_engine(rigged_engine)
    with pytest.raises(IllegalPhaseTransition):
        engine.cancel_guess()


# ---------------------
# PENALTY PHASE
# ---------------------

def wrong_guess_engine(rigged_engine, hands=HANDS):
    engine = drawn_engine(rigged_engine, hands=hands)
    engine.select_guess_target(1, 0)
    engine.submit_guess(9)
    return engine


def test_penalty_reveal_then_confirm_passes_the_turn(rigged_engine):
    engine = wrong_guess_engine(rigged_engine)
    drawn = engine.game.players[0].drawn_card

    result = engine.select_penalty_card(2)
    assert (result['card']['color'], result['card']['value']) == (BLACK, 8)
    assert engine.game.players[0].hand[2].revealed is True
    assert engine.game.phase == Phase.AWAITING_PENALTY_CONFIRMATION
    assert engine.game.current_player_index == 0

    engine.confirm_penalty_and_end_turn()

    game = engine.game
    assert game.current_player_index == 1
    assert game.phase == Phase.AWAITING_DRAW
    p0 = game.players[0]
    assert p0.drawn_card is None
    assert len(p0.hand) == 5
    assert drawn in p0.hand
    assert [c for c in p0.hand if c == drawn][0].revealed is False
    assert sum(c.revealed for c in p0.hand) == 1
    assert_hands_sorted(game)


@pytest.mark.parametrize("index", [0, 5, -1])
def test_invalid_penalty_selection(rigged_engine, index):
    engine = wrong_guess_engine(rigged_engine, hands=["B1* W4 B8 W10", "B2 W5 B7 W11"])
    before = engine.get_public_state()

    with pytest.raises(InvalidPenaltySelection):
        engine.select_penalty_card(index)

    assert engine.get_public_state() == before


def test_cannot_end_turn_instead_of_penalty(rigged_engine):
    engine = wrong_guess_engine(rigged_engine)
    with pytest.raises(IllegalPhaseTransition):
        engine.end_turn()
    with pytest.raises(IllegalPhaseTransition):
        engine.confirm_penalty_and_end_turn()


def test_wrong_guess_with_fully_revealed_hand_ends_turn(rigged_engine):
    engine = rigged_engine(["B1* W4*", "B2 W5"], "B3", phase=Phase.AWAITING_GUESS_OR_END_TURN)
    engine.game.players[0].drawn_card = Card(BLACK, 0)

    engine.select_guess_target(1, 0)
    result = engine.submit_guess(9)

    assert result == {'correct': False, 'penalty': False}
    game = engine.game
    assert game.current_player_index == 1
    assert game.phase == Phase.AWAITING_DRAW
    assert keys(game.players[0].hand) == keys(parse_cards("B0 B1 W4"))
    assert game.players[0].hand[0].revealed is False
    assert any("no hidden cards" in entry for entry in game.action_history)


# ---------------------
# TURN CONTROL
# ---------------------

def test_end_turn_merges_drawn_card_and_wraps(rigged_engine):
    engine = rigged_engine(["B1 W4", "B2 W5", "B6 W8"], "B0 W0", current=2)
    engine.draw()
    engine.choose_draw_color(WHITE)

    engine.end_turn()

    game = engine.game
    assert game.current_player_index == 0
    assert keys(game.players[2].hand) == keys(parse_cards("W0 B6 W8"))
    assert game.players[2].drawn_card is None
    assert game.turn_number == 2
    assert "Player 1's turn" in game.message


def test_end_turn_needs_a_draw_while_deck_has_cards(rigged_engine):
    engine = rigged_engine(HANDS, DECK)
    with pytest.raises(MustDrawFirst):
        engine.end_turn()


def test_end_turn_on_empty_deck_without_drawing(rigged_engine):
    engine = rigged_engine(["B1 W4", "B2 W5", "B6 W8"], "")
    engine.end_turn()
    assert engine.game.current_player_index == 1
    assert engine.game.phase == Phase.AWAITING_DRAW


def test_rejected_command_leaves_state_untouched(rigged_engine):
    engine = drawn_engine(rigged_engine)
    before = engine.get_public_state()
    for bad in (lambda: engine.draw(),
                lambda: engine.select_guess_target(0, 0),
                lambda: engine.select_penalty_card(0),
                lambda: engine.submit_guess(3),
                lambda: engine.confirm_penalty_and_end_turn()):
        with pytest.raises(Exception):
            bad()
    assert engine.get_public_state() == before


# ---------------------
# END OF ROUND
# ---------------------

def test_sole_player_with_hidden_cards_wins_after_turn_advance(rigged_engine):
    engine = rigged_engine(["B1 W4", "B2* W5", "B3* W6*"], "")

    engine.select_guess_target(1, 1)
    engine.submit_guess(5)
    assert engine.game.phase == Phase.AWAITING_GUESS_OR_END_TURN

    result = engine.end_turn()

    game = engine.game
    assert result['game_over'] is True
    assert game.phase == Phase.GAME_OVER
    assert game.winner is game.players[0]
    assert engine.get_public_state()['winner_name'] == "Player 1"
    assert "wins" in game.message


def test_no_hidden_cards_and_empty_deck_is_a_draw(rigged_engine):
    engine = rigged_engine(["B1* W4*", "B2* W5*"], "")
    engine.end_turn()

    game = engine.game
    assert game.phase == Phase.GAME_OVER
    assert game.winner is None
    assert "draw" in game.message


def test_penalty_on_last_hidden_card_hands_the_win_to_opponent(rigged_engine):
    engine = rigged_engine(["B1 W4*", "B2 W5*"], "")
    engine.select_guess_target(1, 0)
    engine.submit_guess(3)
    engine.select_penalty_card(0)
    engine.confirm_penalty_and_end_turn()

    assert engine.game.phase == Phase.GAME_OVER
    assert engine.game.winner is engine.game.players[1]


def test_game_continues_while_deck_has_cards(rigged_engine):
    engine = rigged_engine(["B1 W4", "B2* W5*"], "B0 B3")
    engine.draw()
    engine.end_turn()

    assert engine.game.phase == Phase.AWAITING_DRAW
    assert engine.game.winner is None
    assert engine.game.current_player_index == 1


def test_game_continues_with_two_hidden_hands(rigged_engine):
    engine = rigged_engine(["B1 W4", "B2 W5*", "B3* W6*"], "")
    engine.end_turn()
    assert engine.game.phase == Phase.AWAITING_DRAW
    assert engine.game.current_player_index == 1


def test_commands_after_game_over_are_illegal_until_reset(rigged_engine):
    engine = rigged_engine(["B1* W4*", "B2* W5*"], "")
    engine.end_turn()

    for command in (engine.draw, engine.end_turn, engine.begin_guess, engine.cancel_guess):
        with pytest.raises(IllegalPhaseTransition):
            command()
    # turn already passed to player 2, so player 1 is a legal target id
    with pytest.raises(IllegalPhaseTransition):
        engine.select_guess_target(0, 0)

    assert engine.available_actions() == ['start_game', 'reset_game']
    engine.reset_game()
    assert engine.game.phase == Phase.AWAITING_DRAW
    assert_card_conservation(engine.game)


# ---------------------
# DISPATCH
# ---------------------

def test_dispatch_reports_success_and_errors(rigged_engine):
    engine = rigged_engine(HANDS, DECK)

    ok = engine.dispatch('draw')
    assert ok['ok'] is True
    assert ok['state']['phase'] == 'awaiting_color_choice'

    bad = engine.dispatch('select_guess_target', 0, 0)
    assert bad['ok'] is False
    assert bad['error'] == 'CannotGuessSelf'
    assert bad['message']
    assert bad['state']['phase'] == 'awaiting_color_choice'


def test_dispatch_unknown_command_raises():
    with pytest.raises(ValueError):
        GameEngine(seed=1).dispatch('shuffle_everything')


def test_available_actions_follow_the_phase(rigged_engine):
    engine = rigged_engine(HANDS, DECK)
    assert engine.available_actions() == ['draw', 'reset_game']
    engine.draw()
    assert engine.available_actions() == ['choose_draw_color', 'reset_game']
    engine.choose_draw_color(BLACK)
    assert 'end_turn' in engine.available_actions()


def test_public_state_reports_true_values(rigged_engine):
    engine = drawn_engine(rigged_engine)
    state = engine.get_public_state()

    assert state['started'] is True
    assert state['deck_size'] == 3
    assert state['deck_colors'] == {BLACK: 1, WHITE: 2}
    assert state['players'][1]['hand'][2] == {'color': BLACK, 'value': 7, 'revealed': False}
    assert state['players'][0]['drawn_card']['color'] == BLACK
    assert state['current_player'] == 0
    assert state['winner'] is None
