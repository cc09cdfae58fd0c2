"""Unit tests for parsers."""

import unittest
from unittest.mock import MagicMock, patch

import requests

from riskwatch.errors import InvalidInputError, MalformedResponse, NewsSourceError
from riskwatch.parsers.assessment import extract_json_object, parse_assessment
from riskwatch.parsers.newsapi import MAX_PAGE_SIZE, NewsAPIParser, validate_page_size

VALID_REPLY = (
    'Sure! {"Risk_Type":"Supply Chain","Severity":"High",'
    '"Affected_Nodes":["chip"],"Explanation":"x","Risk_Score":8.5} Thanks.'
)


class TestExtractJsonObject(unittest.TestCase):
    def test_ignores_surrounding_prose(self):
        candidate = extract_json_object(VALID_REPLY)
        self.assertTrue(candidate.startswith("{"))
        self.assertTrue(candidate.endswith("}"))
        self.assertNotIn("Thanks", candidate)

    def test_markdown_fence(self):
        text = '```json\n{"a": {"b": 1}}\n```'
        self.assertEqual(extract_json_object(text), '{"a": {"b": 1}}')

    def test_braces_inside_strings(self):
        text = 'Note {"Explanation": "uses } and { chars", "n": 1} end'
        self.assertEqual(
            extract_json_object(text), '{"Explanation": "uses } and { chars", "n": 1}'
        )

    def test_stops_at_first_object(self):
        text = '{"first": 1} and later {"second": 2}'
        self.assertEqual(extract_json_object(text), '{"first": 1}')

    def test_no_object(self):
        with self.assertRaises(MalformedResponse):
            extract_json_object("I cannot comply.")

    def test_unbalanced(self):
        with self.assertRaises(MalformedResponse):
            extract_json_object('{"Risk_Type": "None"')


class TestParseAssessment(unittest.TestCase):
    def test_valid_reply(self):
        assessment = parse_assessment(VALID_REPLY)
        self.assertEqual(assessment["Risk_Type"], "Supply Chain")
        self.assertEqual(assessment["Severity"], "High")
        self.assertEqual(assessment["Affected_Nodes"], ["chip"])
        self.assertEqual(assessment["Explanation"], "x")
        self.assertEqual(assessment["Risk_Score"], 8.5)

    def test_extra_keys_dropped(self):
        text = (
            '{"Risk_Type":"None","Severity":"None","Affected_Nodes":[],'
            '"Explanation":"ok","Risk_Score":0,"Confidence":0.9}'
        )
        self.assertNotIn("Confidence", parse_assessment(text))

    def test_out_of_range_values_pass_through(self):
        text = (
            '{"Risk_Type":"Operational","Severity":"Critical",'
            '"Affected_Nodes":["steel"],"Explanation":"x","Risk_Score":14}'
        )
        assessment = parse_assessment(text)
        self.assertEqual(assessment["Risk_Type"], "Operational")
        self.assertEqual(assessment["Risk_Score"], 14)

    def test_invalid_json(self):
        with self.assertRaises(MalformedResponse):
            parse_assessment("{Risk_Type: High}")

    def test_missing_field(self):
        text = '{"Risk_Type":"None","Severity":"None","Affected_Nodes":[],"Explanation":"x"}'
        with self.assertRaisesRegex(MalformedResponse, "Risk_Score missing"):
            parse_assessment(text)

    def test_mistyped_fields(self):
        text = (
            '{"Risk_Type":"None","Severity":"None","Affected_Nodes":"chip",'
            '"Explanation":"x","Risk_Score":"8"}'
        )
        with self.assertRaises(MalformedResponse) as ctx:
            parse_assessment(text)
        self.assertIn("Affected_Nodes", str(ctx.exception))
        self.assertIn("Risk_Score", str(ctx.exception))

    def test_boolean_score_rejected(self):
        text = (
            '{"Risk_Type":"None","Severity":"None","Affected_Nodes":[],'
            '"Explanation":"x","Risk_Score":true}'
        )
        with self.assertRaises(MalformedResponse):
            parse_assessment(text)

    def test_non_finite_score_rejected(self):
        for score in ("NaN", "Infinity", "-Infinity", "1e999", "-1e999"):
            text = (
                '{"Risk_Type":"None","Severity":"None","Affected_Nodes":[],'
                '"Explanation":"x","Risk_Score":' + score + "}"
            )
            with self.subTest(score=score):
                with self.assertRaises(MalformedResponse):
                    parse_assessment(text)

    def test_non_standard_constant_anywhere_rejected(self):
        text = (
            '{"Risk_Type":"None","Severity":"None","Affected_Nodes":[],'
            '"Explanation":"x","Risk_Score":1,"Confidence":NaN}'
        )
        with self.assertRaises(MalformedResponse):
            parse_assessment(text)


class TestNewsAPIParser(unittest.TestCase):
    @patch("requests.get")
    def test_fetch(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.ok = True
        mock_resp.json.return_value = {
            "status": "ok",
            "totalResults": 1,
            "articles": [
                {
                    "source": {"id": None, "name": "Reuters"},
                    "title": "Chip shortage hits plants",
                    "description": "desc",
                    "content": "body",
                    "publishedAt": "2024-05-01T10:00:00Z",
                    "url": "https://example.com/a",
                    "urlToImage": "https://example.com/a.png",
                }
            ],
        }
        mock_get.return_value = mock_resp

        parser = NewsAPIParser("news-key", url="https://news.test/v2/everything")
        articles = parser.fetch("Tata Motors", 5)

        self.assertEqual(len(articles), 1)
        self.assertEqual(articles[0]["title"], "Chip shortage hits plants")
        self.assertEqual(articles[0]["source"], {"id": None, "name": "Reuters"})
        self.assertNotIn("urlToImage", articles[0])

        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["headers"], {"X-Api-Key": "news-key"})
        self.assertEqual(kwargs["params"]["q"], "Tata Motors")
        self.assertEqual(kwargs["params"]["pageSize"], 5)
        self.assertEqual(kwargs["params"]["sortBy"], "publishedAt")
        self.assertEqual(kwargs["params"]["language"], "en")

    @patch("requests.get")
    def test_fetch_error_status(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.ok = False
        mock_resp.status_code = 401
        mock_resp.text = "unauthorized"
        mock_get.return_value = mock_resp

        with self.assertRaisesRegex(NewsSourceError, "401"):
            NewsAPIParser("bad-key").fetch("q", 5)

    @patch("requests.get")
    def test_fetch_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("down")

        with self.assertRaises(NewsSourceError):
            NewsAPIParser("key").fetch("q", 5)

    def test_validate_page_size(self):
        self.assertEqual(validate_page_size(1), 1)
        self.assertEqual(validate_page_size(MAX_PAGE_SIZE), MAX_PAGE_SIZE)
        for size in (0, -1, MAX_PAGE_SIZE + 1, "20", 20.0, None, True):
            with self.subTest(size=size):
                with self.assertRaises(InvalidInputError):
                    validate_page_size(size)


if __name__ == "__main__":
    unittest.main()
