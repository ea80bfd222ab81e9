import random
import unittest
from collections import Counter

from fortress.engine.selector import ReservoirSelector


class DeterministicSelectorTests(unittest.TestCase):
    def test_first_best_wins_without_randomization(self) -> None:
        selector = ReservoirSelector(randomize=False)
        for name, score in (("a", 3), ("b", 2), ("c", 2), ("d", 5)):
            selector.consider(name, score)
        self.assertEqual(selector.value, "b")
        self.assertEqual(selector.score, 2)
        self.assertEqual(selector.count, 2)

    def test_lower_score_resets_ties(self) -> None:
        selector = ReservoirSelector(randomize=False)
        selector.consider("a", 2)
        selector.consider("b", 2)
        selector.consider("c", 1)
        self.assertEqual(selector.value, "c")
        self.assertEqual(selector.count, 1)

    def test_empty_selector(self) -> None:
        selector = ReservoirSelector()
        self.assertTrue(selector.empty)
        self.assertIsNone(selector.value)


class RandomSelectorTests(unittest.TestCase):
    def test_ties_are_selected_uniformly(self) -> None:
        rng = random.Random(1234)
        runs = 6000
        wins = Counter()
        for _ in range(runs):
            selector = ReservoirSelector(randomize=True, rng=rng)
            selector.consider("worse", 4)
            for name in ("a", "b", "c"):
                selector.consider(name, 1)
            selector.consider("late-worse", 2)
            wins[selector.value] += 1

        self.assertEqual(set(wins), {"a", "b", "c"})
        for name in ("a", "b", "c"):
            self.assertAlmostEqual(wins[name] / runs, 1 / 3, delta=0.04)

    def test_single_best_always_kept(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            selector = ReservoirSelector(randomize=True, rng=rng)
            selector.consider("x", 3)
            selector.consider("best", 1)
            selector.consider("y", 3)
            self.assertEqual(selector.value, "best")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
