"""Word clustering: split a word set into puzzle-sized, letter-compatible groups."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..core.constants import RARE_LETTERS, Difficulty
from ..core.exceptions import ClusteringError
from ..core.models import Word, WordCluster
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ClusterConfig:
    """Size bounds for the clusters produced by :class:`WordClusterer`."""

    min_cluster_size: int = 8
    max_cluster_size: int = 15
    target_cluster_size: int = 12
    min_overlap: int = 1

    def __post_init__(self) -> None:
        if self.min_cluster_size < 1 or self.target_cluster_size < 1:
            raise ValueError("Cluster sizes must be positive")
        if self.max_cluster_size < self.min_cluster_size:
            raise ValueError(
                f"max_cluster_size ({self.max_cluster_size}) is below "
                f"min_cluster_size ({self.min_cluster_size})"
            )


@dataclass
class ClusteringStats:
    total_clusters: int
    total_words: int
    avg_cluster_size: float
    min_cluster_size: int
    max_cluster_size: int
    avg_score: float
    avg_overlap: float
    difficulty_breakdown: Dict[str, int] = field(default_factory=dict)


def shared_letter_count(first: Word, second: Word) -> int:
    return len(set(first.term) & set(second.term))


def crossing_potential(first: Word, second: Word) -> int:
    """Number of letter-position pairs on which the two words could cross."""

    return sum(1 for a in first.term for b in second.term if a == b)


def compatibility_score(first: Word, second: Word, min_overlap: int = 1) -> float:
    shared = shared_letter_count(first, second)
    if shared == 0 or shared < min_overlap:
        return 0.0
    length_bonus = 10 if abs(len(first.term) - len(second.term)) <= 2 else 0
    return 10 * shared + 5 * crossing_potential(first, second) + length_bonus


def assess_difficulty(words: Sequence[Word]) -> Difficulty:
    if not words:
        return Difficulty.EASY
    avg_length = sum(len(word.term) for word in words) / len(words)
    rare_count = sum(1 for word in words for letter in RARE_LETTERS if letter in word.term)
    rare_ratio = rare_count / len(words)
    if rare_ratio > 0.3 or avg_length > 9:
        return Difficulty.HARD
    if rare_ratio > 0.1 or avg_length > 7:
        return Difficulty.MEDIUM
    return Difficulty.EASY


class CompatibilityMatrix:
    """Memoized pairwise compatibility keyed by word id."""

    def __init__(self, min_overlap: int = 1) -> None:
        self.min_overlap = min_overlap
        self._scores: Dict[Tuple[str, str], float] = {}

    def score(self, first: Word, second: Word) -> float:
        if first.id == second.id:
            return 0.0
        key = (first.id, second.id) if first.id < second.id else (second.id, first.id)
        cached = self._scores.get(key)
        if cached is None:
            cached = compatibility_score(first, second, self.min_overlap)
            self._scores[key] = cached
        return cached

    def average(self, word: Word, members: Sequence[Word]) -> float:
        if not members:
            return 0.0
        return sum(self.score(word, member) for member in members) / len(members)


class WordClusterer:
    """Greedy round-robin partitioner seeded with the longest words."""

    def __init__(self, config: Optional[ClusterConfig] = None) -> None:
        self.config = config or ClusterConfig()
        self.matrix = CompatibilityMatrix(self.config.min_overlap)

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def cluster(self, words: Sequence[Word]) -> List[WordCluster]:
        if not words:
            return []

        config = self.config
        count = self.target_cluster_count(len(words))
        ordered = sorted(words, key=lambda word: len(word.term), reverse=True)
        remaining: Dict[str, Word] = {word.id: word for word in ordered}
        groups: List[List[Word]] = [[] for _ in range(count)]

        # Seed each cluster with one of the longest words.
        for group in groups:
            seed = self._first_remaining(ordered, remaining)
            if seed is None:
                break
            group.append(seed)
            del remaining[seed.id]

        index = 0
        while remaining:
            open_groups = [i for i, group in enumerate(groups) if len(group) < config.max_cluster_size]
            if not open_groups:
                # Every cluster is full; coverage wins over the target count.
                seed = self._take_first(ordered, remaining)
                groups.append([seed])
                del remaining[seed.id]
                index = len(groups) - 1
                LOGGER.debug("All clusters full, opened cluster %d", len(groups))
                continue

            while len(groups[index]) >= config.max_cluster_size:
                index = (index + 1) % len(groups)
            group = groups[index]

            chosen = self._most_compatible(group, ordered, remaining)
            if chosen is None:
                chosen = self._take_first(ordered, remaining)
            group.append(chosen)
            del remaining[chosen.id]
            index = (index + 1) % len(groups)

        clusters = [self._build_cluster(group) for group in groups if group]
        if not self.validate_clustering(clusters, words):
            raise ClusteringError("Clustering does not cover the input words exactly")
        return clusters

    def redistribute_failed_words(
        self, failed_words: Iterable[Word], clusters: List[WordCluster]
    ) -> List[WordCluster]:
        """Append each failed word to the cluster it is most compatible with."""

        failed = list(failed_words)
        if not failed or not clusters:
            return clusters

        touched: Set[int] = set()
        for word in failed:
            best_index = 0
            best_score = -1.0
            for position, cluster in enumerate(clusters):
                average = self.matrix.average(word, cluster.words)
                if average > best_score:
                    best_score = average
                    best_index = position
            clusters[best_index].words.append(word)
            touched.add(best_index)
            LOGGER.debug("Redistributed %s to cluster %d (score %.1f)", word.term, best_index, best_score)

        for position in touched:
            self._refresh_metadata(clusters[position])
        return clusters

    @staticmethod
    def validate_clustering(clusters: Sequence[WordCluster], words: Sequence[Word]) -> bool:
        """Clusters must hold every input word exactly once."""

        clustered = [word.id for cluster in clusters for word in cluster.words]
        return len(clustered) == len(set(clustered)) and set(clustered) == {word.id for word in words}

    def target_cluster_count(self, total: int) -> int:
        config = self.config
        count = max(1, math.ceil(total / config.target_cluster_size))
        # Merge undersized clusters as long as the merged ones still fit.
        while (
            count > 1
            and total / count < config.min_cluster_size
            and math.ceil(total / (count - 1)) <= config.max_cluster_size
        ):
            count -= 1
        return count

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _first_remaining(ordered: Sequence[Word], remaining: Dict[str, Word]) -> Optional[Word]:
        for word in ordered:
            if word.id in remaining:
                return word
        return None

    @classmethod
    def _take_first(cls, ordered: Sequence[Word], remaining: Dict[str, Word]) -> Word:
        word = cls._first_remaining(ordered, remaining)
        if word is None:
            raise ClusteringError("Remaining words are missing from the ordered input")
        return word

    def _most_compatible(
        self, group: Sequence[Word], ordered: Sequence[Word], remaining: Dict[str, Word]
    ) -> Optional[Word]:
        best: Optional[Word] = None
        best_score = 0.0
        for word in ordered:
            if word.id not in remaining:
                continue
            average = self.matrix.average(word, group)
            if average > best_score:
                best_score = average
                best = word
        return best

    def _build_cluster(self, words: List[Word]) -> WordCluster:
        cluster = WordCluster(words=words)
        self._refresh_metadata(cluster)
        return cluster

    def _refresh_metadata(self, cluster: WordCluster) -> None:
        words = cluster.words
        pairs = [(a, b) for i, a in enumerate(words) for b in words[i + 1:]]
        if pairs:
            cluster.score = sum(self.matrix.score(a, b) for a, b in pairs) / len(pairs)
            cluster.avg_letter_overlap = sum(shared_letter_count(a, b) for a, b in pairs) / len(pairs)
        else:
            cluster.score = 0.0
            cluster.avg_letter_overlap = 0.0
        cluster.difficulty = assess_difficulty(words)


def cluster_words(words: Sequence[Word], config: Optional[ClusterConfig] = None) -> List[WordCluster]:
    return WordClusterer(config).cluster(words)


def clustering_stats(clusters: Sequence[WordCluster]) -> ClusteringStats:
    breakdown = {difficulty.value: 0 for difficulty in Difficulty}
    for cluster in clusters:
        breakdown[cluster.difficulty.value] += 1
    if not clusters:
        return ClusteringStats(0, 0, 0.0, 0, 0, 0.0, 0.0, breakdown)
    sizes = [len(cluster) for cluster in clusters]
    return ClusteringStats(
        total_clusters=len(clusters),
        total_words=sum(sizes),
        avg_cluster_size=sum(sizes) / len(clusters),
        min_cluster_size=min(sizes),
        max_cluster_size=max(sizes),
        avg_score=sum(cluster.score for cluster in clusters) / len(clusters),
        avg_overlap=sum(cluster.avg_letter_overlap for cluster in clusters) / len(clusters),
        difficulty_breakdown=breakdown,
    )
