import threading
import time
import unittest
from unittest.mock import patch

from text_summarizer.datatypes import Sentence, SummarizationRequest, SummarizationResult
from text_summarizer.errors import InvalidParameters, RankingTimeout
from text_summarizer.summarize import select, summarize, summarize_text

SCENARIO = "A cat sat. A dog ran. A cat and dog played."

ARTICLE = (
    "Solar panels convert sunlight into electricity. "
    "Modern solar panels are cheaper than ever before. "
    "The weather was mild on Tuesday. "
    "Cheaper electricity from sunlight helps households cut costs. "
    "Many households now install solar panels on their roofs. "
    "A local bakery opened a second shop."
)


def _rank_threads():
    return [t for t in threading.enumerate() if t.name.startswith("rank")]


def _sentences(n):
    return [Sentence(idx=i, text=f"Sentence {i}.") for i in range(n)]


class SelectTests(unittest.TestCase):
    def test_document_order_for_every_k(self) -> None:
        sentences = _sentences(6)
        scores = {0: 0.1, 1: 0.5, 2: 0.3, 3: 0.9, 4: 0.2, 5: 0.7}
        for k in range(0, 7):
            chosen = [s.idx for s in select(scores, sentences, k)]
            self.assertEqual(chosen, sorted(chosen))
            self.assertEqual(len(chosen), k)
        self.assertEqual([s.idx for s in select(scores, sentences, 3)], [1, 3, 5])

    def test_ties_favor_earlier_sentences(self) -> None:
        scores = {0: 0.2, 1: 0.5, 2: 0.5, 3: 0.5}
        self.assertEqual([s.idx for s in select(scores, _sentences(4), 2)], [1, 2])

    def test_k_is_clamped(self) -> None:
        sentences = _sentences(3)
        scores = {0: 1.0, 1: 2.0, 2: 3.0}
        self.assertEqual(select(scores, sentences, -4), [])
        self.assertEqual(len(select(scores, sentences, 10)), 3)


class SummarizeTests(unittest.TestCase):
    def test_sentence_sharing_most_terms_is_chosen(self) -> None:
        result = summarize(SummarizationRequest(text=SCENARIO, target_size=20))
        self.assertEqual(result.sentence_count, 3)
        self.assertAlmostEqual(result.compression_ratio, 20 / len(SCENARIO))
        self.assertEqual(result.target_sentence_count, 1)
        self.assertEqual(result.sentences, ("A cat and dog played.",))
        self.assertGreater(result.iterations, 0)

    def test_empty_text_gives_empty_result(self) -> None:
        result = summarize(SummarizationRequest(text=""))
        self.assertEqual(result.sentences, ())
        self.assertEqual(result.target_sentence_count, 0)
        self.assertEqual(result.text, "")
        self.assertEqual(len(result), 0)

    def test_count_mode(self) -> None:
        result = summarize_text(ARTICLE, target_count=2)
        self.assertEqual(len(result), 2)
        self.assertEqual(result.target_sentence_count, 2)
        for sentence in result.sentences:
            self.assertIn(sentence, ARTICLE)
        self.assertNotIn("A local bakery opened a second shop.", result.sentences)
        self.assertLess(ARTICLE.index(result.sentences[0]), ARTICLE.index(result.sentences[1]))

    def test_cosine_mode(self) -> None:
        result = summarize_text(ARTICLE, target_count=3, similarity="cosine")
        self.assertEqual(len(result), 3)
        self.assertNotIn("The weather was mild on Tuesday.", result.sentences)

    def test_large_budget_keeps_everything(self) -> None:
        result = summarize_text(SCENARIO, target_size=10_000)
        self.assertEqual(result.text, SCENARIO)

    def test_statistics(self) -> None:
        result = summarize_text(ARTICLE, target_size=120)
        self.assertEqual(result.total_chars, len(ARTICLE))
        self.assertEqual(result.sentence_count, 6)
        self.assertAlmostEqual(result.mean_sentence_length, len(ARTICLE) / 6)
        self.assertEqual(result.target_sentence_count, int(6 * 120 / len(ARTICLE)) or 1)

    def test_timeout_propagates(self) -> None:
        with patch("text_summarizer.summarize.run_bounded", side_effect=RankingTimeout(0.5)):
            with self.assertRaises(RankingTimeout):
                summarize_text(ARTICLE, target_count=2, timeout=0.5)

    def test_deadline_covers_graph_construction(self) -> None:
        # thousands of sentences: pairing them all takes far longer than the deadline
        text = " ".join(f"Topic{i % 50} item{i} note{i} detail{i}." for i in range(4000))
        started = time.monotonic()
        with self.assertRaises(RankingTimeout):
            summarize_text(text, target_count=3, timeout=1.0)
        self.assertLess(time.monotonic() - started, 2.0)

        deadline = time.monotonic() + 2.0
        while _rank_threads() and time.monotonic() < deadline:
            time.sleep(0.01)
        self.assertEqual(_rank_threads(), [])

    def test_non_english_text_is_ranked(self) -> None:
        text = "Кошка спит дома. Собака бежит быстро. Кошка и собака играют."
        result = summarize_text(text, target_count=1)
        self.assertEqual(result.sentences, ("Кошка и собака играют.",))

    def test_result_is_immutable(self) -> None:
        result = SummarizationResult(sentences=("One.",))
        with self.assertRaises(AttributeError):
            result.sentences = ()


class RequestValidationTests(unittest.TestCase):
    def test_defaults(self) -> None:
        request = SummarizationRequest(text="x")
        self.assertEqual(request.target_size, 1024)
        self.assertIsNone(request.target_count)
        self.assertEqual(request.max_iterations, 200)
        self.assertEqual(request.timeout, 5.0)

    def test_rejects_bad_values(self) -> None:
        bad = [
            dict(target_size=0),
            dict(target_size=-10),
            dict(target_count=0),
            dict(target_size=100, target_count=2),
            dict(timeout=0),
            dict(timeout=-1.5),
            dict(timeout=float("nan")),
            dict(timeout=float("inf")),
            dict(max_iterations=0),
            dict(similarity="jaccard"),
        ]
        for kwargs in bad:
            with self.subTest(**kwargs):
                with self.assertRaises(InvalidParameters):
                    SummarizationRequest(text="Some text.", **kwargs)

    def test_invalid_parameters_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            summarize_text("Some text.", timeout=0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
