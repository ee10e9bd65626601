import pytest

from rollpoly.errors import InvalidDiceCountError, InvalidDieSizeError, InvalidModifierError
from rollpoly.evaluator import MAX_EXPLOSIONS, MAX_REROLLS, evaluate, select_indices
from rollpoly.models import Constant, DiceGroup, DropHighest, DropLowest, Expression, KeepHighest, KeepLowest
from rollpoly.parser import parse


def run(text, draws, fixed_rng):
    rng = fixed_rng(draws)
    output = evaluate(parse(text), rng)
    assert rng.draws == [], "not every scripted draw was consumed"
    return output


@pytest.mark.parametrize(
    ("text", "draws", "values"),
    [
        ("2d6", [3, 5], (3, 5)),
        ("42", [], (42,)),
        ("2d6 + 3", [3, 5], (3, 5, 3)),
        ("2d6 - 3", [3, 5], (3, 5, -3)),
        ("2d6 - 1d4", [3, 5, 2], (3, 5, -2)),
        ("4d6K3", [6, 5, 4, 1], (6, 5, 4)),
        ("4d6k2", [6, 5, 4, 1], (4, 1)),
        ("4d6X", [6, 5, 4, 1], (5, 4, 1)),
        ("4d6x", [6, 5, 4, 1], (6, 5, 4)),
        ("4d6K2", [5, 1, 6, 2], (5, 6)),
        ("6d6X1x1", [2, 6, 3, 1, 5, 4], (2, 3, 5, 4)),
        ("2d6K5", [3, 5], (3, 5)),
        ("2d6X5", [3, 5], ()),
        ("2d6K0", [3, 5], ()),
    ],
)
def test_sequences(text, draws, values, fixed_rng):
    output = run(text, draws, fixed_rng)
    assert output.values == values
    assert not output.is_success_count


def test_keep_more_than_rolled_keeps_everything(constant_rng):
    output = evaluate(parse("100d6k99"), constant_rng(3))
    assert output.values == (3,) * 99


def test_equal_values_rank_by_roll_order():
    assert select_indices([4, 4, 4], KeepHighest(1)) == [0]
    assert select_indices([4, 4, 4], KeepLowest(1)) == [2]
    assert select_indices([4, 4, 4], DropHighest(1)) == [1, 2]
    assert select_indices([4, 4, 4], DropLowest(2)) == [0]


def test_selection_does_not_reorder_the_pool():
    pool = [2, 9, 4, 9, 1]
    assert select_indices(pool, KeepHighest(3)) == [1, 2, 3]
    assert pool == [2, 9, 4, 9, 1]


@pytest.mark.parametrize(
    ("text", "draws", "values"),
    [
        # once: a reroll that comes up 1 again stays
        ("4d6r1", [1, 5, 1, 3, 1, 6], (1, 5, 6, 3)),
        ("3d6r1r2", [1, 2, 3, 4, 5], (4, 5, 3)),
        ("2d6r<3", [2, 6, 4], (4, 6)),
        ("2d6R1", [1, 3, 1, 1, 4], (4, 3)),
        ("1d6r1R2", [1, 2, 2, 5], (5,)),
        ("2d6!", [6, 3, 6, 2], (6, 3, 6, 2)),
        ("2d6!>4", [5, 2, 6, 1], (5, 2, 6, 1)),
        ("3d6!K2", [6, 1, 2, 4], (6, 4)),
        ("3d6K2!", [6, 1, 2, 4], (6, 4)),
        ("2d6r1!", [1, 6, 6, 3, 2], (6, 6, 3, 2)),
    ],
)
def test_reroll_and_explode(text, draws, values, fixed_rng):
    assert run(text, draws, fixed_rng).values == values


def test_continuous_reroll_is_capped(constant_rng):
    rng = constant_rng(2)
    output = evaluate(parse("1d6R<7"), rng)
    assert output.values == (2,)
    assert rng.calls == 1 + MAX_REROLLS


def test_explosions_are_capped_per_die(constant_rng):
    rng = constant_rng(2)
    output = evaluate(parse("2d2!"), rng)
    assert len(output.values) == 2 + 2 * MAX_EXPLOSIONS
    assert rng.calls == 2 + 2 * MAX_EXPLOSIONS


@pytest.mark.parametrize(
    ("text", "draws", "successes"),
    [
        ("3d6>4", [5, 2, 6], 2),
        ("8d6<3", [1, 2, 3, 4, 5, 6, 1, 2], 4),
        ("6d10>6f<3", [7, 2, 9, 1, 5, 10], 1),
        ("3d10>8f<5", [1, 2, 9], -1),
        ("3d6>4f1", [5, 1, 1], -1),
        ("4d6K2>4", [6, 5, 1, 2], 2),
        ("4d6>4K2", [6, 5, 1, 2], 2),
        ("2d6!>4", [6, 3, 1], None),
        ("3d6>4 + 2", [5, 2, 6], 4),
        ("2d6 + 3d6>4", [3, 5, 5, 2, 6], 10),
        ("2d6 - 3d6>4", [3, 5, 5, 2, 6], 6),
        ("3d6>4 * 2", [5, 2, 6], 4),
    ],
)
def test_success_counting(text, draws, successes, fixed_rng):
    output = run(text, draws, fixed_rng)
    if successes is None:
        assert not output.is_success_count
        return
    assert output.is_success_count
    assert output.successes == successes
    assert output.values == (successes,)


@pytest.mark.parametrize(
    ("text", "draws", "values"),
    [
        ("2d6 * 3", [3, 5], (24,)),
        ("2d6 + 3 * 2", [3, 5], (22,)),
        ("2d6 * 2 + 1", [3, 5], (16, 1)),
        ("7 / 2", [], (3,)),
        ("7 // 2", [], (3,)),
        ("1 - 8 / 3", [], (-2,)),
        ("1 - 8 // 3", [], (-3,)),
        ("1d6 * 2d4", [4, 1, 3], (16,)),
        ("12 / 1d4", [3], (4,)),
    ],
)
def test_left_to_right_arithmetic(text, draws, values, fixed_rng):
    assert run(text, draws, fixed_rng).values == values


def test_zero_divisor_from_a_roll_fails_at_evaluation(fixed_rng):
    expression = parse("6 / 2d6K0")
    with pytest.raises(InvalidModifierError) as exc:
        evaluate(expression, fixed_rng([3, 5]))
    assert "division by zero" in str(exc.value)

    with pytest.raises(InvalidModifierError):
        evaluate(parse("6 // 3d6>6"), fixed_rng([1, 2, 3]))


@pytest.mark.parametrize(
    ("expression", "error"),
    [
        (Expression(DiceGroup(count=0, sides=6)), InvalidDiceCountError),
        (Expression(DiceGroup(count=2, sides=0)), InvalidDieSizeError),
        (Expression(Constant(1), (("+", DiceGroup(count=-1, sides=6)),)), InvalidDiceCountError),
        (Expression(DiceGroup(count=2, sides=6, modifiers=(KeepHighest(-1),))), InvalidModifierError),
        (Expression(DiceGroup(count=2, sides=6), (("/", Constant(0)),)), InvalidModifierError),
    ],
)
def test_invalid_expressions_fail_before_any_draw(expression, error, constant_rng):
    rng = constant_rng(1)
    with pytest.raises(error):
        evaluate(expression, rng)
    assert rng.calls == 0


def test_constant_source_repeats_its_value(constant_rng):
    assert evaluate(parse("5d8"), constant_rng(4)).values == (4,) * 5


@pytest.mark.parametrize(
    "draws",
    [
        [6, 5, 4, 1],
        [1, 1, 1, 1],
        [3, 6, 2, 6],
        [2, 4, 6, 5],
    ],
)
def test_keep_highest_sum_is_at_least_keep_lowest_sum(draws, fixed_rng):
    high = evaluate(parse("4d6K2"), fixed_rng(draws)).total
    low = evaluate(parse("4d6k2"), fixed_rng(draws)).total
    assert high >= low


def test_same_draws_same_output(fixed_rng):
    expression = parse("4d6!r1K3 + 2d4 - 1")
    draws = [1, 6, 3, 2, 4, 5, 3, 2]
    assert evaluate(expression, fixed_rng(draws)) == evaluate(expression, fixed_rng(draws))


def test_dice_are_drawn_from_the_die_range(fixed_rng):
    rng = fixed_rng([3, 5, 2])
    evaluate(parse("2d6 + 1d4"), rng)
    assert rng.calls == [(1, 6), (1, 6), (1, 4)]
