import random
import unittest
from itertools import product

from fortress.core.constants import BRANCH_PRECEDENCE, Attribute, BranchKind, SolveStatus
from fortress.engine.cpsat import count_solutions_cpsat
from fortress.engine.grid import FortressGrid
from fortress.engine.solver import SolveOptions, _Search, solve
from fortress.engine.validator import GridValidator

from helpers import (
    LATIN_4,
    WIKIPEDIA_PUZZLE,
    WIKIPEDIA_SOLUTION,
    brute_force_latin_4,
    digits,
    grid4,
)

NUMBERS_ONLY = SolveOptions(branch_shadings=False)


class ScenarioTests(unittest.TestCase):
    def test_empty_4x4_yields_one_full_grid(self) -> None:
        grid = grid4()
        result = solve(grid, SolveOptions(limit=1))
        self.assertEqual(result.count, 1)
        self.assertEqual(result.status, SolveStatus.COMPLETE)
        self.assertFalse(result.incomplete)
        solution = result.solutions[0]
        self.assertTrue(solution.is_complete())
        self.assertTrue(GridValidator().validate(solution).ok)
        # The searched grid is left untouched.
        self.assertEqual(grid, grid4())

    def test_classic_sudoku_is_unique(self) -> None:
        grid = FortressGrid(9, 3, 3, digits(WIKIPEDIA_PUZZLE), [False] * 81)
        result = solve(grid, SolveOptions(limit=2))
        self.assertEqual(result.count, 1)
        self.assertFalse(result.incomplete)
        self.assertEqual(result.solutions[0].numbers, digits(WIKIPEDIA_SOLUTION))

    def test_circle_grid_solutions_are_sound(self) -> None:
        circles = [False] * 16
        circles[5] = True
        grid = grid4([], [], circles)
        result = solve(grid, SolveOptions(limit=5, randomize=True, seed=7))
        self.assertEqual(result.count, 5)
        validator = GridValidator()
        for solution in result.solutions:
            self.assertTrue(validator.validate(solution).ok)
            self.assertIs(solution.shadings[5], False)


class DeterminismTests(unittest.TestCase):
    def test_repeated_runs_match(self) -> None:
        numbers = [None] * 16
        numbers[0] = 1
        numbers[5] = 3
        first = solve(grid4(numbers), NUMBERS_ONLY)
        second = solve(grid4(numbers), NUMBERS_ONLY)
        self.assertGreater(first.count, 1)
        self.assertEqual(
            [s.fingerprint() for s in first.solutions],
            [s.fingerprint() for s in second.solutions],
        )
        self.assertEqual(first.steps, second.steps)

    def test_seeded_random_runs_match(self) -> None:
        options = SolveOptions(limit=3, randomize=True, seed=99)
        first = solve(grid4(), options)
        second = solve(grid4(), options)
        self.assertEqual(
            [s.fingerprint() for s in first.solutions],
            [s.fingerprint() for s in second.solutions],
        )


class CompletenessTests(unittest.TestCase):
    def test_all_latin_squares_found_once(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY)
        found = [tuple(solution.numbers) for solution in result.solutions]
        self.assertEqual(len(found), len(set(found)))
        self.assertEqual(set(found), brute_force_latin_4())
        self.assertEqual(len(found), 288)

    def test_latin_count_matches_cpsat(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY)
        independent = count_solutions_cpsat(grid4(), branch_shadings=False)
        self.assertTrue(independent.exhaustive)
        self.assertEqual(independent.count, result.count)

    def test_shading_completions_match_brute_force(self) -> None:
        free = (0, 5, 10, 15)
        shadings = [False] * 16
        for index in free:
            shadings[index] = None
        grid = grid4(LATIN_4, shadings)

        result = solve(grid)
        found = {tuple(s.shadings[index] for index in free) for s in result.solutions}
        self.assertEqual(len(found), result.count)

        validator = GridValidator()
        expected = set()
        for combo in product((True, False), repeat=len(free)):
            candidate = grid.clone()
            for index, shading in zip(free, combo):
                candidate.shadings[index] = shading
            if validator.validate(candidate).ok:
                expected.add(combo)
        self.assertEqual(found, expected)

        independent = count_solutions_cpsat(grid)
        self.assertEqual(independent.count, len(expected))


class UniquenessOracleTests(unittest.TestCase):
    def test_contradictory_grid_has_no_solution(self) -> None:
        result = solve(grid4([1, 1]), SolveOptions(limit=2))
        self.assertEqual(result.count, 0)
        self.assertEqual(result.status, SolveStatus.COMPLETE)

    def test_nearly_full_grid_is_unique(self) -> None:
        numbers = list(LATIN_4)
        numbers[0] = None
        numbers[1] = None
        result = solve(grid4(numbers), NUMBERS_ONLY.with_changes(limit=2))
        self.assertEqual(result.count, 1)
        self.assertEqual(result.solutions[0].numbers, LATIN_4)

    def test_empty_grid_is_not_unique(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY.with_changes(limit=2))
        self.assertEqual(result.count, 2)
        self.assertFalse(result.incomplete)

    def test_complete_grid_costs_one_step(self) -> None:
        result = solve(grid4(LATIN_4, [False] * 16), SolveOptions(limit=2))
        self.assertEqual(result.count, 1)
        self.assertEqual(result.steps, 1)


class BudgetTests(unittest.TestCase):
    def test_step_budget_marks_incomplete(self) -> None:
        grid = FortressGrid(9, 3, 3)
        result = solve(grid, NUMBERS_ONLY.with_changes(limit=1, step_budget=10))
        self.assertTrue(result.incomplete)
        self.assertEqual(result.status, SolveStatus.BUDGET_EXCEEDED)
        self.assertEqual(result.count, 0)
        self.assertLessEqual(result.steps, 10)
        self.assertEqual(grid, FortressGrid(9, 3, 3))

    def test_depth_budget_marks_incomplete(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY.with_changes(limit=1, depth_budget=3))
        self.assertTrue(result.incomplete)
        self.assertEqual(result.count, 0)

    def test_reaching_limit_is_not_incomplete(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY.with_changes(limit=1, step_budget=1000))
        self.assertEqual(result.count, 1)
        self.assertFalse(result.incomplete)


def scan(grid: FortressGrid, options: SolveOptions = SolveOptions()):
    return _Search(grid, options, random.Random(0))._scan()


class ScanTests(unittest.TestCase):
    def forced_pair(self) -> FortressGrid:
        # Cell 5 can only hold 4 and cell 0 can only stay unshaded.
        numbers = list(LATIN_4)
        numbers[5] = None
        shadings = [False] * 16
        shadings[0] = None
        return grid4(numbers, shadings)

    def test_number_beats_shading_on_tied_score(self) -> None:
        consistent, branch = scan(self.forced_pair())
        self.assertTrue(consistent)
        self.assertEqual(branch.kind, BranchKind.NUMBER)
        self.assertEqual((branch.index, branch.score, branch.options), (5, 1, [4]))
        self.assertEqual(BRANCH_PRECEDENCE[0], BranchKind.NUMBER)

    def test_shading_chosen_when_numbers_are_done(self) -> None:
        consistent, branch = scan(self.forced_pair(), SolveOptions(branch_numbers=False))
        self.assertTrue(consistent)
        self.assertEqual(branch.kind, BranchKind.SHADING)
        self.assertEqual((branch.index, branch.score, branch.options), (0, 1, [False]))

    def test_hidden_single_takes_coordinate_branch(self) -> None:
        numbers = [None] * 16
        # 1s in box 2 and column 1 leave cell 0 as the only place for 1 in row 0.
        numbers[6] = 1
        numbers[13] = 1
        consistent, branch = scan(grid4(numbers), NUMBERS_ONLY)
        self.assertTrue(consistent)
        self.assertEqual(branch.kind, BranchKind.COORDINATE)
        self.assertEqual((branch.score, branch.options, branch.value), (1, [0], 1))
        self.assertEqual(list(branch.moves()), [(0, Attribute.NUMBER, 1)])

    def test_no_coordinate_pass_without_hidden_single(self) -> None:
        _, branch = scan(grid4(), NUMBERS_ONLY)
        self.assertEqual(branch.kind, BranchKind.NUMBER)
        self.assertEqual((branch.index, branch.score), (0, 4))

    def test_boring_shading_score(self) -> None:
        _, branch = scan(grid4(), SolveOptions(branch_numbers=False))
        self.assertEqual(branch.kind, BranchKind.SHADING)
        # (2 - 1) * 4 + 1
        self.assertEqual((branch.index, branch.score), (0, 5))

    def test_numbered_cell_is_interesting(self) -> None:
        _, branch = scan(grid4([None, None, None, 2]), SolveOptions(branch_numbers=False))
        self.assertEqual((branch.index, branch.score), (3, 2))

    def test_circle_neighbour_is_interesting(self) -> None:
        shadings = [None] * 16
        shadings[5] = False
        circles = [False] * 16
        circles[5] = True
        _, branch = scan(grid4([], shadings, circles), SolveOptions(branch_numbers=False))
        self.assertEqual((branch.index, branch.score), (1, 2))

    def test_inconsistent_grid_prunes(self) -> None:
        self.assertEqual(scan(grid4([1, 1])), (False, None))

    def test_complete_grid_has_no_branch(self) -> None:
        self.assertEqual(scan(grid4(LATIN_4, [False] * 16)), (True, None))


class ExplorationOptionTests(unittest.TestCase):
    def test_explore_any_caps_scores_at_two(self) -> None:
        _, branch = scan(grid4(), NUMBERS_ONLY.with_changes(explore_any=True))
        self.assertEqual(branch.kind, BranchKind.NUMBER)
        self.assertEqual(branch.score, 2)
        self.assertEqual(branch.options, [1, 2, 3, 4])

    def test_explore_any_without_chase_one_caps_at_one(self) -> None:
        _, branch = scan(grid4(), NUMBERS_ONLY.with_changes(explore_any=True, chase_one=False))
        self.assertEqual(branch.score, 1)
        self.assertEqual(branch.options, [1, 2, 3, 4])

    def test_explore_any_shading_score_ignores_interest(self) -> None:
        _, branch = scan(grid4(), SolveOptions(branch_numbers=False, explore_any=True))
        self.assertEqual(branch.kind, BranchKind.SHADING)
        self.assertEqual(branch.score, 2)

    def test_explore_any_stays_complete(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY.with_changes(explore_any=True))
        self.assertEqual({tuple(s.numbers) for s in result.solutions}, brute_force_latin_4())
        self.assertEqual(result.count, 288)

    def test_lookahead_keeps_every_solution(self) -> None:
        numbers = list(LATIN_4)
        numbers[0] = None
        numbers[5] = None
        shadings = [False] * 16
        for index in (0, 5, 10, 15):
            shadings[index] = None
        grid = grid4(numbers, shadings)

        plain = solve(grid)
        ahead = solve(grid, SolveOptions(shading_lookahead=True))
        self.assertGreater(plain.count, 0)
        self.assertEqual(
            sorted(s.fingerprint() for s in plain.solutions),
            sorted(s.fingerprint() for s in ahead.solutions),
        )

    def test_defaults_match_plain_search(self) -> None:
        options = SolveOptions()
        self.assertFalse(options.explore_any)
        self.assertTrue(options.chase_one)
        self.assertFalse(options.shading_lookahead)


class BranchSelectionTests(unittest.TestCase):
    def test_shading_only_search_keeps_numbers(self) -> None:
        grid = grid4(LATIN_4)
        result = solve(grid, SolveOptions(limit=3, branch_numbers=False))
        self.assertEqual(result.count, 3)
        for solution in result.solutions:
            self.assertEqual(solution.numbers, LATIN_4)
            self.assertTrue(solution.is_complete())

    def test_number_only_search_leaves_shading_unset(self) -> None:
        result = solve(grid4(), NUMBERS_ONLY.with_changes(limit=1))
        self.assertEqual(result.solutions[0].shadings, [None] * 16)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
