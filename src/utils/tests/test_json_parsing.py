"""Unit tests for JSON parsing and truncated-response repair."""

import json
import unittest

from utils.json_parsing import (
    ParsedJSON,
    parse_json_content,
    parse_model_json,
    repair_truncated_json,
    strip_markdown_fences,
)


def _word(index: int, text: str) -> dict:
    return {
        "id": str(index),
        "original": text,
        "lemma": text.lower(),
        "partOfSpeech": "noun",
        "morphemes": [
            {"text": text.lower(), "type": "root", "meaning": "core"},
            {"text": "s", "type": "ending", "meaning": "plural"},
        ],
        "isPunctuation": False,
    }


def _full_payload() -> dict:
    words = [_word(i, t) for i, t in enumerate(["Cats", "chase", "mice", "every", "day"])]
    return {"sentence": "Cats chase mice every day", "sentenceTranslation": "...", "words": words}


class TestStripMarkdownFences(unittest.TestCase):
    """Test cases for strip_markdown_fences."""

    def test_plain_json_unchanged(self):
        self.assertEqual(strip_markdown_fences('{"a": 1}'), '{"a": 1}')

    def test_json_fence_removed(self):
        self.assertEqual(strip_markdown_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_bare_fence_removed(self):
        self.assertEqual(strip_markdown_fences('```\n{"a": 1}\n```'), '{"a": 1}')

    def test_uppercase_fence_removed(self):
        self.assertEqual(strip_markdown_fences('```JSON {"a": 1}```'), '{"a": 1}')

    def test_surrounding_whitespace_trimmed(self):
        self.assertEqual(strip_markdown_fences('  \n{"a": 1}\n  '), '{"a": 1}')


class TestRepairTruncatedJson(unittest.TestCase):
    """Test cases for repair_truncated_json."""

    def test_truncated_after_third_word_keeps_three(self):
        """Text cut mid-way through word 4 of 5 salvages the first 3 words."""
        full = json.dumps(_full_payload(), separators=(",", ":"))
        fourth = json.dumps(_word(3, "every"), separators=(",", ":"))
        cut = full.index(fourth) + len(fourth) // 2
        truncated = full[:cut]

        repaired = repair_truncated_json(truncated)

        self.assertIsNotNone(repaired)
        self.assertEqual(len(repaired["words"]), 3)
        self.assertEqual([w["original"] for w in repaired["words"]], ["Cats", "chase", "mice"])

    def test_salvaged_words_are_unmodified_prefix(self):
        """Repaired words equal the first N words of the complete payload."""
        payload = _full_payload()
        full = json.dumps(payload, separators=(",", ":"))
        truncated = full[:len(full) - 40]

        repaired = repair_truncated_json(truncated)

        self.assertIsNotNone(repaired)
        count = len(repaired["words"])
        self.assertGreater(count, 0)
        self.assertEqual(repaired["words"], payload["words"][:count])

    def test_cut_inside_morphemes_falls_back_to_previous_word(self):
        """A boundary between morphemes of an unfinished word is not used."""
        full = json.dumps(_full_payload(), separators=(",", ":"))
        # Cut right after the first morpheme of word 4, inside its morphemes array
        marker = '{"text":"every","type":"root","meaning":"core"},{'
        cut = full.index(marker) + len(marker)
        repaired = repair_truncated_json(full[:cut])

        self.assertIsNotNone(repaired)
        self.assertEqual(len(repaired["words"]), 3)

    def test_pretty_printed_boundary(self):
        """Whitespace between elements is tolerated."""
        text = '{"sentence": "a b", "words": [\n  {"id": "0"},\n  {"id": "1"},\n  {"id": "2", "orig'
        repaired = repair_truncated_json(text)

        self.assertEqual(repaired, {"sentence": "a b", "words": [{"id": "0"}, {"id": "1"}]})

    def test_no_boundary_returns_none(self):
        self.assertIsNone(repair_truncated_json('{"sentence": "x", "words": [{"id": "0", "orig'))

    def test_unparseable_after_repair_returns_none(self):
        self.assertIsNone(repair_truncated_json('garbage},{more garbage'))

    def test_empty_text_returns_none(self):
        self.assertIsNone(repair_truncated_json(""))


class TestParseModelJson(unittest.TestCase):
    """Test cases for parse_model_json."""

    def test_valid_json_not_marked_repaired(self):
        result = parse_model_json('{"sentence": "x", "words": []}')

        self.assertEqual(result, ParsedJSON({"sentence": "x", "words": []}, repaired=False))

    def test_fenced_json(self):
        result = parse_model_json('```json\n{"sentence": "x", "words": []}\n```')

        self.assertIsNotNone(result)
        self.assertFalse(result.repaired)
        self.assertEqual(result.data["sentence"], "x")

    def test_truncated_json_marked_repaired(self):
        text = '{"sentence": "x", "words": [{"id": "0"},{"id": "1"},{"id": "2'

        result = parse_model_json(text)

        self.assertIsNotNone(result)
        self.assertTrue(result.repaired)
        self.assertEqual(result.data["words"], [{"id": "0"}, {"id": "1"}])

    def test_unrecoverable_returns_none(self):
        self.assertIsNone(parse_model_json("I cannot analyze this sentence."))

    def test_empty_text_returns_none(self):
        self.assertIsNone(parse_model_json(""))


class TestParseJsonContent(unittest.TestCase):
    """Test cases for parse_json_content (no repair)."""

    def test_plain_json(self):
        self.assertEqual(parse_json_content('{"root": "port"}'), {"root": "port"})

    def test_fenced_json(self):
        self.assertEqual(parse_json_content('```json\n{"root": "port"}\n```'), {"root": "port"})

    def test_truncated_json_not_repaired(self):
        self.assertIsNone(parse_json_content('{"root": "port", "derivatives": [{"word": "a"},{"wo'))


if __name__ == '__main__':
    unittest.main()
