import unittest
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic: never reach a real AI provider.
os.environ["AI_INSIGHTS_ENABLED"] = "0"

from fastapi.testclient import TestClient

from cv_ats.main import app


class AnalyzeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.payload = {
            "resume_text": (
                "Jane Doe\n"
                "jane@example.com | +1 555-123-4567\n"
                "Summary\n"
                "Backend engineer with 6 years building Python services.\n"
                "Experience\n"
                "- Built REST APIs with Django and cut latency by 35%\n"
                "Education\n"
                "BSc Computer Science\n"
                "Skills\n"
                "Python, Django, PostgreSQL, Docker\n"
            ),
            "job_title": "Backend Engineer",
            "job_description": "Python backend engineer with Django, PostgreSQL and Docker experience.",
        }

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_analyze_contract_shape(self):
        response = self.client.post("/v1/analyze", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertEqual(
            [item["category"] for item in body["results"]],
            ["Quantitative Impact", "CV Length", "CV Completeness", "Job Keyword Match"],
        )
        self.assertIsInstance(body["overall_score"], int)
        self.assertEqual(body["industry"], "technology")
        self.assertIn("weighted_score", body["composite"])
        self.assertEqual(len(body["composite"]["breakdown"]), 4)
        self.assertEqual(body["insight_sources"], {"completeness": "rules", "keywords": "rules"})
        self.assertEqual(
            [item["category"] for item in body["ats_checks"]],
            ["CV Parsing", "Format & Readability", "Scoring & Ranking"],
        )
        self.assertTrue(body["metadata"]["has_email"])

    def test_composite_can_be_skipped(self):
        payload = dict(self.payload, include_composite=False)
        response = self.client.post("/v1/analyze", json=payload)
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["composite"])

    def test_empty_payload_still_returns_report(self):
        response = self.client.post("/v1/analyze", json={})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["metadata"]["word_count"], 0)

    def test_rejects_script_injection(self):
        payload = dict(self.payload, job_description="<script>alert(1)</script>")
        response = self.client.post("/v1/analyze", json=payload)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["field"], "job_description")

        payload = dict(self.payload, resume_text="Click javascript:steal()")
        self.assertEqual(self.client.post("/v1/analyze", json=payload).status_code, 422)

    def test_rejects_embedded_objects_and_focus_handlers(self):
        samples = [
            '<object data="payload.swf"></object>',
            '<EMBED src="payload.swf">',
            '<input onfocus="steal()">',
            '<a onBlur = "steal()">x</a>',
        ]
        for sample in samples:
            with self.subTest(sample=sample):
                payload = dict(self.payload, job_description=f"Python engineer {sample}")
                response = self.client.post("/v1/analyze", json=payload)
                self.assertEqual(response.status_code, 422)
                self.assertEqual(response.json()["detail"]["field"], "job_description")

    def test_rejects_markup_in_job_title(self):
        payload = dict(self.payload, job_title="Engineer <b>")
        response = self.client.post("/v1/analyze", json=payload)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["field"], "job_title")

    def test_rejects_oversized_fields(self):
        cases = {
            "resume_text": "x" * 10001,
            "job_title": "x" * 101,
            "job_description": "x" * 2001,
        }
        for field, value in cases.items():
            with self.subTest(field=field):
                payload = dict(self.payload, **{field: value})
                self.assertEqual(self.client.post("/v1/analyze", json=payload).status_code, 422)


if __name__ == "__main__":
    unittest.main()
