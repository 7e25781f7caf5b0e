import re
import unittest

from text_summarizer.preprocessing import (
    PreprocessConfig,
    build_document,
    compute_idf,
    is_noise_token,
    segment,
    tokenize,
)


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class SegmentTests(unittest.TestCase):
    def test_empty_and_blank_text_yield_no_sentences(self) -> None:
        self.assertEqual(segment(""), [])
        self.assertEqual(segment("   \n\t "), [])

    def test_splits_on_terminators(self) -> None:
        sentences = segment("A cat sat. A dog ran. A cat and dog played.")
        self.assertEqual([s.text for s in sentences],
                         ["A cat sat.", "A dog ran.", "A cat and dog played."])
        self.assertEqual([s.idx for s in sentences], [0, 1, 2])

    def test_question_and_exclamation_marks_end_sentences(self) -> None:
        sentences = segment("Is it raining? Yes! Bring an umbrella.")
        self.assertEqual(len(sentences), 3)
        self.assertEqual(sentences[1].text, "Yes!")

    def test_abbreviations_and_decimals_are_not_boundaries(self) -> None:
        sentences = segment("Dr. Smith paid 3.50 dollars for lunch. He was happy.")
        self.assertEqual([s.text for s in sentences],
                         ["Dr. Smith paid 3.50 dollars for lunch.", "He was happy."])

    def test_text_without_terminator_is_one_sentence(self) -> None:
        sentences = segment("  no terminator anywhere in this text  ")
        self.assertEqual(len(sentences), 1)
        self.assertEqual(sentences[0].text, "no terminator anywhere in this text")

    def test_unterminated_tail_becomes_last_sentence(self) -> None:
        sentences = segment("First part is done. Then a trailing fragment")
        self.assertEqual([s.text for s in sentences],
                         ["First part is done.", "Then a trailing fragment"])

    def test_sentences_reconstruct_the_text(self) -> None:
        text = "The first sentence is here.  The second one follows!\nIs there a third? Yes there is."
        sentences = segment(text)
        self.assertEqual(len(sentences), 4)
        self.assertEqual(_normalize(" ".join(s.text for s in sentences)), _normalize(text))

    def test_spans_point_at_trimmed_text(self) -> None:
        text = "  Alpha beta.   Gamma delta!  "
        for s in segment(text):
            self.assertEqual(text[s.start:s.end], s.text)


    def test_known_boundary_limits(self) -> None:
        self.assertEqual(len(segment("第一句。第二句。")), 1)
        self.assertEqual(len(segment("She moved to the U.S. He stayed home.")), 1)


class TokenizeTests(unittest.TestCase):
    def test_stopwords_removed_and_stemmed(self) -> None:
        self.assertEqual(tokenize("A cat and dog played.", PreprocessConfig()), ["cat", "dog", "play"])

    def test_non_ascii_words(self) -> None:
        self.assertEqual(tokenize("Café au lait", PreprocessConfig()), ["café", "au", "lait"])
        self.assertEqual(tokenize("Кошка и собака", PreprocessConfig()), ["кошка", "и", "собака"])

    def test_config_can_keep_everything(self) -> None:
        cfg = PreprocessConfig(remove_stopwords=False, stemming=False)
        self.assertEqual(tokenize("The dogs played", cfg), ["the", "dogs", "played"])

    def test_noise_tokens(self) -> None:
        self.assertTrue(is_noise_token("123e4567-e89b-12d3-a456-426614174000"))
        self.assertTrue(is_noise_token("d41d8cd98f00b204e9800998ecf8427e"))
        self.assertFalse(is_noise_token("summary"))
        self.assertFalse(is_noise_token("человеконенавистничество"))
        self.assertTrue(is_noise_token("bcdfghjklmnpqrstvwxzbcdf"))


class BuildDocumentTests(unittest.TestCase):
    def test_tokens_and_tfidf_vectors_attached(self) -> None:
        doc = build_document("Cats chase mice. Dogs chase cats. Birds fly.")
        self.assertEqual(len(doc.sentences), 3)
        self.assertEqual(doc.sentences[0].tokens, ["cat", "chase", "mice"])
        for s in doc.sentences:
            self.assertEqual(set(s.tf_idf_vector), set(s.tokens))
        # a term found in fewer sentences weighs more
        idf = compute_idf(doc.sentences)
        self.assertGreater(idf["fly"], idf["chase"])

    def test_empty_text(self) -> None:
        doc = build_document("")
        self.assertEqual(doc.sentences, [])
        self.assertEqual(doc.raw_text, "")


if __name__ == "__main__":
    unittest.main(verbosity=2)
