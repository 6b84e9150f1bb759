"""패턴 생성/그리기 테스트."""

from unittest.mock import MagicMock

import pytest

from content.pattern import MAX_ALPHA, MIN_ALPHA, dot_alpha, generate_grid, paint_grid

SEED = "SoftwareAscending"


def _apply_rule(row):
    width = len(row)
    out = []
    for j in range(width):
        val = row[(j - 1) % width] * 4 + row[j] * 2 + row[(j + 1) % width]
        out.append(0 if val in (0, 4, 7) else 1)
    return out


def test_same_seed_gives_identical_grid():
    assert generate_grid(30, 70, SEED) == generate_grid(30, 70, SEED)


def test_different_seed_changes_grid():
    assert generate_grid(30, 70, SEED) != generate_grid(30, 70, "other seed")


def test_grid_shape_and_values():
    grid = generate_grid(17, 9, SEED)
    assert len(grid) == 10
    assert all(len(row) == 17 for row in grid)
    assert {cell for row in grid for cell in row} <= {0, 1}


def test_zero_generations_gives_single_row():
    grid = generate_grid(8, 0, SEED)
    assert len(grid) == 1
    assert len(grid[0]) == 8


def test_first_generation_has_no_decay():
    # i=0 이면 pct=0 이므로 규칙표만 적용된다
    for seed in ("a", "b", "c", SEED):
        grid = generate_grid(25, 1, seed)
        assert grid[1] == _apply_rule(grid[0])


def test_rule_table_on_wraparound_row():
    # 0행 패턴과 관계없이 1행은 원형 이웃 규칙을 따른다
    grid = generate_grid(3, 1, "wrap")
    assert grid[1] == _apply_rule(grid[0])


@pytest.mark.parametrize("width,generations", [(0, 5), (-1, 5), (5, -1)])
def test_invalid_arguments_raise(width, generations):
    with pytest.raises(ValueError):
        generate_grid(width, generations, SEED)


def test_density_decays_toward_last_generation():
    generations = 60
    early = late = 0
    for n in range(40):
        grid = generate_grid(40, generations, f"seed-{n}")
        early += sum(sum(row) for row in grid[1:21])
        late += sum(sum(row) for row in grid[-20:])
    assert late < early


def test_paint_grid_draws_only_qualifying_cells():
    canvas = MagicMock()
    grid = [[1, 1], [1, 1]]
    drawn = paint_grid(canvas, grid, 100, 100, 20)

    # 1행은 곱이 0.25, 0.5 로 임계값(0.15) 이상이므로 0행 두 점만 그린다
    assert drawn == 2
    assert canvas.fill_circle.call_count == 2
    first, second = canvas.fill_circle.call_args_list
    assert first.args[:3] == (105, 85, 5)
    assert second.args[:3] == (105, 95, 5)
    assert first.args[3] == (100, 150, 180, round(MAX_ALPHA * 255))


def test_paint_grid_skips_zero_cells():
    canvas = MagicMock()
    assert paint_grid(canvas, [[0, 0, 0]], 50, 50, 30) == 0
    canvas.fill_circle.assert_not_called()


def test_dot_alphas_stay_within_bounds():
    canvas = MagicMock()
    grid = generate_grid(30, 70, SEED)
    drawn = paint_grid(canvas, grid, 300, 300, 80)
    assert drawn == canvas.fill_circle.call_count > 0
    for call in canvas.fill_circle.call_args_list:
        alpha = call.args[3][3]
        assert round(MIN_ALPHA * 255) <= alpha <= round(MAX_ALPHA * 255)


def test_dot_alpha_ramp():
    assert dot_alpha(0) == pytest.approx(MAX_ALPHA)
    assert dot_alpha(0.15) == pytest.approx(MIN_ALPHA)
    assert dot_alpha(0.05) > dot_alpha(0.1)
