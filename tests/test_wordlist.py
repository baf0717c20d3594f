import json
import tempfile
import unittest
from pathlib import Path

from lexigrid.core.exceptions import WordListError
from lexigrid.core.models import Word
from lexigrid.data.normalization import clean_term
from lexigrid.data.word_banks import all_sample_words, sample_words
from lexigrid.data.wordlist import load_words, parse_word_entries, words_from_records


class CleanTermTests(unittest.TestCase):
    def test_accents_folded(self) -> None:
        self.assertEqual(clean_term("mañana"), "MANANA")
        self.assertEqual(clean_term("Corazón"), "CORAZON")
        self.assertEqual(clean_term("straße"), "STRASSE")

    def test_non_letters_dropped(self) -> None:
        self.assertEqual(clean_term("hot-dog 2"), "HOTDOG")
        self.assertEqual(clean_term(""), "")
        self.assertEqual(clean_term("123"), "")

    def test_word_normalizes_term(self) -> None:
        word = Word("w1", "árbol ", "Tree")
        self.assertEqual(word.term, "ARBOL")
        self.assertEqual(len(word), 5)


class ParseEntriesTests(unittest.TestCase):
    def test_terms_and_clues(self) -> None:
        words = parse_word_entries(["casa:House", "  # comment", "", "perro : Dog ", "gato"])
        self.assertEqual([word.id for word in words], ["word-1", "word-2", "word-3"])
        self.assertEqual([word.term for word in words], ["CASA", "PERRO", "GATO"])
        self.assertEqual([word.clue for word in words], ["House", "Dog", ""])

    def test_clue_may_contain_colons(self) -> None:
        (word,) = parse_word_entries(["hora:Time: hours"], id_prefix="arg")
        self.assertEqual(word.id, "arg-1")
        self.assertEqual(word.clue, "Time: hours")

    def test_records(self) -> None:
        words = words_from_records([{"id": "a", "term": "sol", "clue": "Sun"}, {"term": "mar"}])
        self.assertEqual([(w.id, w.term, w.clue) for w in words], [("a", "SOL", "Sun"), ("word-2", "MAR", "")])
        with self.assertRaises(WordListError):
            words_from_records({"term": "sol"})
        with self.assertRaises(WordListError):
            words_from_records([{"clue": "Sun"}])


class LoadWordsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_text_file(self) -> None:
        path = self.root / "words.txt"
        path.write_text("# vocabulary\nLUNA:Moon\nSOL:Sun\n", encoding="utf-8")
        words = load_words(path)
        self.assertEqual([(w.term, w.clue) for w in words], [("LUNA", "Moon"), ("SOL", "Sun")])

    def test_json_file(self) -> None:
        path = self.root / "words.json"
        path.write_text(json.dumps([{"id": "x1", "term": "Montaña", "clue": "Mountain"}]), encoding="utf-8")
        (word,) = load_words(path)
        self.assertEqual((word.id, word.term, word.clue), ("x1", "MONTANA", "Mountain"))

    def test_missing_file(self) -> None:
        with self.assertRaises(WordListError):
            load_words(self.root / "missing.txt")

    def test_invalid_json(self) -> None:
        path = self.root / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with self.assertRaises(WordListError):
            load_words(path)


class WordBankTests(unittest.TestCase):
    def test_bank_ids_unique(self) -> None:
        words = all_sample_words()
        self.assertEqual(len(words), 60)
        self.assertEqual(len({word.id for word in words}), 60)
        self.assertTrue(all(word.term and word.clue for word in words))

    def test_sample_is_reproducible(self) -> None:
        self.assertEqual(sample_words(10, seed=4), sample_words(10, seed=4))
        self.assertEqual(len(sample_words(10, seed=4)), 10)
        self.assertEqual(len(sample_words(500)), 60)
        self.assertEqual(sample_words(0), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
