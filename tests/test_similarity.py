import math
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_ats.semantic import (
    jaccard_similarity,
    normalize_term,
    normalized_terms,
    tfidf_rank,
    tokenize,
    top_terms,
)


class TokenizerTests(unittest.TestCase):
    def test_drops_short_tokens_stop_words_and_punctuation(self):
        tokens = tokenize("We need a Python/Django developer, with REST APIs and dengan pengalaman!")
        self.assertEqual(tokens, ["need", "python", "django", "developer", "rest", "apis", "pengalaman"])

    def test_min_length_is_configurable(self):
        self.assertIn("sql", tokenize("SQL and Go", min_length=3))
        self.assertNotIn("sql", tokenize("SQL and Go"))

    def test_normalized_terms_ignore_punctuation(self):
        self.assertEqual(normalize_term("Node.js"), "nodejs")
        self.assertEqual(normalize_term("C++"), "c++")
        self.assertIn("nodejs", normalized_terms("Experience with Node.js, React"))
        self.assertIn("nodejs", normalized_terms("Node JS backend"))


class TfidfTests(unittest.TestCase):
    def test_identical_documents_score_zero(self):
        tokens = tokenize("python developer building data pipelines with python")
        ranked = tfidf_rank([tokens, list(tokens)], 0)

        self.assertTrue(ranked)
        for _, score in ranked:
            self.assertEqual(score, 0.0)

    def test_ranking_order_and_values(self):
        corpus = [["python", "python", "django"], ["java"]]
        ranked = tfidf_rank(corpus, 0)

        self.assertEqual([term for term, _ in ranked], ["python", "django"])
        self.assertAlmostEqual(ranked[0][1], (2 / 3) * math.log(2))
        self.assertAlmostEqual(ranked[1][1], (1 / 3) * math.log(2))

    def test_ties_break_alphabetically_and_repeat_exactly(self):
        corpus = [["zeta", "alpha", "mid"], ["other"]]
        first = tfidf_rank(corpus, 0)
        self.assertEqual([term for term, _ in first], ["alpha", "mid", "zeta"])
        self.assertEqual(first, tfidf_rank(corpus, 0))

    def test_empty_target_and_bad_index(self):
        self.assertEqual(tfidf_rank([[], ["python"]], 0), [])
        with self.assertRaises(IndexError):
            tfidf_rank([["python"]], 3)

    def test_top_terms_limit(self):
        corpus = [[f"term{i:02d}" for i in range(30)], ["other"]]
        self.assertEqual(len(top_terms(corpus, 0, 20)), 20)


class JaccardTests(unittest.TestCase):
    def test_properties(self):
        left = {"python", "django", "docker"}
        right = {"python", "flask"}

        self.assertEqual(jaccard_similarity(left, right), jaccard_similarity(right, left))
        self.assertAlmostEqual(jaccard_similarity(left, right), 1 / 4)
        self.assertEqual(jaccard_similarity(left, left), 1.0)
        self.assertEqual(jaccard_similarity(set(), set()), 0.0)
        self.assertEqual(jaccard_similarity(left, set()), 0.0)


if __name__ == "__main__":
    unittest.main()
