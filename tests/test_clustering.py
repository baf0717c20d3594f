import unittest

from lexigrid.core.constants import Difficulty
from lexigrid.core.models import Word, WordCluster
from lexigrid.data.word_banks import sample_words
from lexigrid.engine.clustering import (
    ClusterConfig,
    WordClusterer,
    assess_difficulty,
    cluster_words,
    clustering_stats,
    compatibility_score,
    crossing_potential,
    shared_letter_count,
)


def words(*terms: str) -> list:
    return [Word(f"w{index}", term) for index, term in enumerate(terms, start=1)]


class CompatibilityTests(unittest.TestCase):
    def test_pair_metrics(self) -> None:
        hello, world = words("HELLO", "WORLD")
        self.assertEqual(shared_letter_count(hello, world), 2)
        self.assertEqual(crossing_potential(hello, world), 3)
        self.assertEqual(compatibility_score(hello, world), 45)

    def test_disjoint_words_score_zero(self) -> None:
        cat, dog = words("CAT", "DOG")
        self.assertEqual(compatibility_score(cat, dog), 0.0)

    def test_min_overlap(self) -> None:
        hello, world = words("HELLO", "WORLD")
        self.assertEqual(compatibility_score(hello, world, min_overlap=3), 0.0)


class DifficultyTests(unittest.TestCase):
    def test_levels(self) -> None:
        self.assertIs(assess_difficulty(words("CAT", "DOG")), Difficulty.EASY)
        self.assertIs(assess_difficulty(words("ELEPHANT", "MOUNTAIN")), Difficulty.MEDIUM)
        self.assertIs(assess_difficulty(words("QUIZ", "JAZZ")), Difficulty.HARD)
        self.assertIs(assess_difficulty([]), Difficulty.EASY)


class ClusterConfigTests(unittest.TestCase):
    def test_rejects_inverted_bounds(self) -> None:
        with self.assertRaises(ValueError):
            ClusterConfig(min_cluster_size=10, max_cluster_size=5)


class WordClustererTests(unittest.TestCase):
    def test_forty_five_words(self) -> None:
        vocabulary = sample_words(45, seed=3)
        clusters = WordClusterer(ClusterConfig(min_cluster_size=8, max_cluster_size=15)).cluster(vocabulary)

        sizes = [len(cluster) for cluster in clusters]
        self.assertEqual(sum(sizes), 45)
        for size in sizes:
            self.assertGreaterEqual(size, 8)
            self.assertLessEqual(size, 15)
        ids = [word.id for cluster in clusters for word in cluster.words]
        self.assertEqual(sorted(ids), sorted(word.id for word in vocabulary))

    def test_small_input_single_cluster(self) -> None:
        clusters = cluster_words(words("HELLO", "WORLD", "CAT"))
        self.assertEqual(len(clusters), 1)
        self.assertEqual(len(clusters[0]), 3)
        self.assertEqual(clusters[0].words[0].term, "HELLO")

    def test_empty_input(self) -> None:
        self.assertEqual(cluster_words([]), [])

    def test_target_cluster_count(self) -> None:
        clusterer = WordClusterer()
        self.assertEqual(clusterer.target_cluster_count(9), 1)
        self.assertEqual(clusterer.target_cluster_count(20), 2)
        self.assertEqual(clusterer.target_cluster_count(45), 4)

    def test_overflow_opens_new_cluster(self) -> None:
        config = ClusterConfig(min_cluster_size=1, max_cluster_size=2, target_cluster_size=5)
        vocabulary = words("ALPHA", "BETA", "GAMMA", "DELTA", "OMEGA", "THETA")
        clusters = WordClusterer(config).cluster(vocabulary)
        self.assertEqual(sum(len(cluster) for cluster in clusters), 6)
        self.assertTrue(all(len(cluster) <= 2 for cluster in clusters))

    def test_validate_clustering(self) -> None:
        cat, dog = words("CAT", "DOG")
        self.assertTrue(WordClusterer.validate_clustering([WordCluster([cat]), WordCluster([dog])], [cat, dog]))
        self.assertFalse(WordClusterer.validate_clustering([WordCluster([cat, cat])], [cat, dog]))
        self.assertFalse(WordClusterer.validate_clustering([WordCluster([cat])], [cat, dog]))


class RedistributionTests(unittest.TestCase):
    def test_failed_word_joins_most_compatible_cluster(self) -> None:
        cat, car, dog, dot, tar = words("CAT", "CAR", "DOG", "DOT", "TAR")
        clusterer = WordClusterer()
        clusters = [WordCluster([cat, car]), WordCluster([dog, dot])]
        clusterer.redistribute_failed_words([tar], clusters)
        self.assertEqual([word.term for word in clusters[0].words], ["CAT", "CAR", "TAR"])
        self.assertEqual(len(clusters[1]), 2)
        self.assertGreater(clusters[0].score, 0.0)

    def test_nothing_to_redistribute(self) -> None:
        clusters = [WordCluster(words("CAT"))]
        self.assertIs(WordClusterer().redistribute_failed_words([], clusters), clusters)


class ClusteringStatsTests(unittest.TestCase):
    def test_summary(self) -> None:
        clusters = cluster_words(sample_words(30, seed=1))
        stats = clustering_stats(clusters)
        self.assertEqual(stats.total_words, 30)
        self.assertEqual(stats.total_clusters, len(clusters))
        self.assertEqual(sum(stats.difficulty_breakdown.values()), len(clusters))

    def test_empty(self) -> None:
        stats = clustering_stats([])
        self.assertEqual(stats.total_clusters, 0)
        self.assertEqual(stats.difficulty_breakdown, {"easy": 0, "medium": 0, "hard": 0})


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
