import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_ats.analyzers.completeness import analyze_completeness, classify_document
from cv_ats.analyzers.impact import analyze_impact, find_quantified_achievements
from cv_ats.analyzers.length import analyze_length
from cv_ats.analyzers.readability import analyze_format, analyze_parsing, analyze_scoring
from cv_ats.parsing.segmenter import segment

CERTIFICATE_TEXT = (
    "Sertifikat\n"
    "Diberikan kepada Budi Santoso\n"
    "Telah menyelesaikan pelatihan Data Analytics\n"
    "Diterbitkan oleh Lembaga Pelatihan Nasional\n"
    "Tanggal terbit 12 Januari 2024\n"
)


def _words(count: int) -> str:
    return " ".join(["word"] * count)


class LengthAnalyzerTests(unittest.TestCase):
    def test_band_edges_score_full(self):
        for count in (200, 400, 600):
            with self.subTest(count=count):
                result = analyze_length(segment(_words(count)))
                self.assertEqual(result.score, 100)
                self.assertEqual(result.status, "excellent")
                self.assertEqual(result.issues, [])

    def test_empty_document_is_too_short(self):
        result = analyze_length(segment(""))
        self.assertLessEqual(result.score, 60)
        self.assertTrue(any("too short" in issue for issue in result.issues))

    def test_shortfall_is_punished_harder_than_verbosity(self):
        short = analyze_length(segment(_words(100)))
        long = analyze_length(segment(_words(1000)))

        self.assertEqual(long.score, 70)
        self.assertLess(long.score, 100)
        self.assertLess(short.score, long.score)
        self.assertTrue(any("too long" in issue for issue in long.issues))

    def test_shortfall_penalty_rounds_half_up(self):
        # 170 words: 20 + 30 * 30 / 200 = 24.5
        self.assertEqual(analyze_length(segment(_words(170))).score, 75)
        # 190 words: 20 + 10 * 30 / 200 = 21.5
        self.assertEqual(analyze_length(segment(_words(190))).score, 78)


class ImpactAnalyzerTests(unittest.TestCase):
    def test_no_job_context_scores_zero(self):
        doc = segment("Increased revenue by 40% across 10+ markets. Built a billing project.")
        result = analyze_impact(doc, "", "")
        self.assertEqual(result.score, 0)
        self.assertEqual(result.status, "poor")
        self.assertEqual(len(result.issues), 1)

    def test_quantified_relevant_project_work_scores_full(self):
        doc = segment(
            "Led 10+ engineers and cut cloud cost by 35% saving $200k over 2 years. "
            "Built and deployed a data platform project."
        )
        result = analyze_impact(doc, "Data Engineer", "data platform cloud engineers")
        self.assertEqual(result.score, 100)
        self.assertEqual(result.issues, [])

    def test_penalties_stack(self):
        doc = segment("I like painting landscapes.")
        result = analyze_impact(doc, "", "kubernetes terraform platform")
        self.assertEqual(result.score, 30)
        self.assertEqual(len(result.issues), 3)
        self.assertIn("0 of 3 job keywords", result.issues[1])

    def test_metric_patterns(self):
        found = find_quantified_achievements(
            "Grew sales 25% and 25 %, managed Rp 5 juta budget, 3 tahun, €1,200 saved, 50+ clients"
        )
        self.assertIn("25%", found)
        self.assertIn("50+", found)
        self.assertIn("3 tahun", found)
        self.assertTrue(any(item.startswith("rp") for item in found))
        self.assertTrue(any(item.startswith("€") for item in found))


class CompletenessAnalyzerTests(unittest.TestCase):
    FULL_CV = (
        "Jane Doe\n"
        "jane@example.com | +1 555-123-4567\n"
        "Summary\n"
        "Backend engineer with 6 years in payments.\n"
        "Experience\n"
        "Engineer at Acme\n"
        "Education\n"
        "BSc Computer Science\n"
        "Skills\n"
        "Python, SQL\n"
    )

    def test_complete_resume_scores_full(self):
        result = analyze_completeness(segment(self.FULL_CV))
        self.assertEqual(result.score, 100)
        self.assertEqual(result.issues, [])

    def test_missing_everything_orders_issues_by_importance(self):
        result = analyze_completeness(segment("hello world"))
        self.assertEqual(result.score, 15)
        self.assertIn("experience", result.issues[0].lower())
        self.assertIn("contact", result.issues[1].lower())

    def test_partial_contact(self):
        text = self.FULL_CV.replace(" | +1 555-123-4567", "")
        result = analyze_completeness(segment(text))
        self.assertEqual(result.score, 90)
        self.assertIn("phone number", result.issues[0])

    def test_inferred_specific_summary_is_accepted(self):
        text = (
            "Jane Doe\n"
            "jane@example.com | +1 555-123-4567\n"
            "Experienced backend developer with 6 years building payment services in Python. "
            "Led the migration to Kubernetes that cut deploy time by 40%.\n"
            "Experience\n"
            "Engineer at Acme\n"
            "Education\n"
            "BSc Computer Science\n"
            "Skills\n"
            "Python, SQL\n"
        )
        result = analyze_completeness(segment(text))
        self.assertEqual(result.score, 100)

    def test_inferred_generic_summary_gets_partial_penalty(self):
        text = (
            "Jane Doe\n"
            "jane@example.com | +1 555-123-4567\n"
            "Motivated hard worker and team player seeking opportunities\n"
            "Experience\n"
            "Engineer at Acme\n"
            "Education\n"
            "BSc Computer Science\n"
            "Skills\n"
            "Python, SQL\n"
        )
        result = analyze_completeness(segment(text))
        self.assertEqual(result.score, 95)
        self.assertIn("generic", result.issues[0])

    def test_certificate_classification(self):
        first = classify_document(CERTIFICATE_TEXT)
        self.assertEqual(first.kind, "certificate")
        self.assertEqual(first, classify_document(CERTIFICATE_TEXT))
        self.assertEqual(classify_document(self.FULL_CV).kind, "resume")

    def test_certificate_skips_summary_requirement(self):
        result = analyze_completeness(segment(CERTIFICATE_TEXT))
        self.assertEqual(result.score, 50)
        self.assertFalse(any("summary" in issue.lower() for issue in result.issues))
        self.assertIn("certificate", result.issues[0])

    def test_certificate_without_issuer_vocabulary(self):
        text = "Certificate\nThis is to certify\nCredential ID 12345\nCompletion date 2024\n"
        result = analyze_completeness(segment(text))
        self.assertEqual(result.score, 40)


class ReadabilityCheckTests(unittest.TestCase):
    def test_parsing_check_penalties(self):
        result = analyze_parsing(segment("hello world"))
        # email 15, phone 10, sections 20, experience 15, education 10
        self.assertEqual(result.score, 30)
        self.assertEqual(result.category, "CV Parsing")

    def test_format_check(self):
        clean = analyze_format(segment("Jane Doe\n- Built APIs\n- Led team\n"))
        self.assertEqual(clean.score, 100)

        messy = analyze_format(segment("jane doe    résumé\nno bullets here\n"))
        # bullets 15, capitalization 10, non-ascii 15, spacing 10
        self.assertEqual(messy.score, 50)

    def test_scoring_check_date_ranges(self):
        body = "Jane Doe\nSummary\nBackend engineer.\nExperience\nEngineer at Acme {dates}\nSkills\nPython\n"
        for dates in ("2019-2023", "2020 – Present", "2021-sekarang"):
            with self.subTest(dates=dates):
                result = analyze_scoring(segment(body.format(dates=dates) + _words(300)))
                self.assertEqual(result.score, 100)
                self.assertEqual(result.category, "Scoring & Ranking")
                self.assertEqual(result.issues, [])

        undated = analyze_scoring(segment(body.format(dates="since last spring") + _words(300)))
        self.assertEqual(undated.score, 80)
        self.assertEqual(undated.issues, ["Employment dates not clearly formatted"])

    def test_scoring_check_penalties(self):
        # short 25, dates 20, skills 15, summary 10
        result = analyze_scoring(segment("hello world"))
        self.assertEqual(result.score, 30)
        self.assertEqual(result.status, "poor")

        long = analyze_scoring(segment("Skills\nPython 2018-2022\nSummary\n" + _words(900)))
        self.assertEqual(long.score, 85)
        self.assertIn("CV may be too lengthy for ATS processing", long.issues)


if __name__ == "__main__":
    unittest.main()
