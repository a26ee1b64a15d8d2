import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_ats.parsing.segmenter import detect_contact_signals, match_header, segment, split_lines


class SegmenterTests(unittest.TestCase):
    def test_english_sections_and_contact_metadata(self):
        text = (
            "Jane Doe\n"
            "jane.doe@example.com | +1 555-123-4567 | linkedin.com/in/janedoe\n"
            "Professional Summary\n"
            "Backend engineer focused on payment systems.\n"
            "Work Experience\n"
            "Software Engineer, Acme Corp\n"
            "Education\n"
            "BSc Computer Science\n"
            "Skills: Python, SQL, Docker\n"
        )
        doc = segment(text)

        self.assertEqual(set(doc.sections), {"summary", "experience", "education", "skills"})
        self.assertEqual(doc.sections["skills"], "Python, SQL, Docker")
        self.assertEqual(doc.sections["experience"], "Software Engineer, Acme Corp")
        self.assertTrue(doc.metadata.has_email)
        self.assertTrue(doc.metadata.has_phone)
        self.assertTrue(doc.metadata.has_linkedin)
        self.assertEqual(doc.metadata.section_count, 4)

    def test_indonesian_headers(self):
        text = (
            "RINGKASAN\n"
            "Lulusan informatika dengan fokus analisis data.\n"
            "PENGALAMAN KERJA\n"
            "Analis Data, PT Maju Jaya\n"
            "PENDIDIKAN\n"
            "S1 Teknik Informatika\n"
            "KEAHLIAN\n"
            "Python, Tableau\n"
            "Kontak: budi@contoh.co.id, 0812-3456-7890\n"
        )
        doc = segment(text)

        self.assertEqual(
            set(doc.sections),
            {"summary", "experience", "education", "skills", "contact"},
        )
        self.assertTrue(doc.metadata.has_phone)
        self.assertTrue(doc.metadata.has_email)

    def test_line_endings_are_interchangeable(self):
        unix = "Experience\nEngineer at Acme\nEducation\nBSc\n"
        windows = unix.replace("\n", "\r\n")
        old_mac = unix.replace("\n", "\r")

        expected = segment(unix).sections
        self.assertEqual(segment(windows).sections, expected)
        self.assertEqual(segment(old_mac).sections, expected)
        self.assertEqual(split_lines(windows), ["Experience", "Engineer at Acme", "Education", "BSc"])

    def test_sentence_starting_with_header_word_is_not_a_header(self):
        self.assertIsNone(match_header("Experienced engineer with a focus on data"))
        self.assertEqual(match_header("== EXPERIENCE =="), ("experience", ""))
        self.assertEqual(match_header("Skills: Go, Rust"), ("skills", "Go, Rust"))

    def test_repeated_header_extends_section(self):
        doc = segment("Skills\nPython\nEducation\nBSc\nSkills\nDocker\n")
        self.assertEqual(doc.sections["skills"], "Python Docker")
        self.assertEqual(doc.metadata.section_count, 2)

    def test_empty_and_whitespace_text(self):
        for text in ("", "   \n\t\r\n  "):
            doc = segment(text)
            self.assertEqual(doc.metadata.word_count, 0)
            self.assertEqual(doc.sections, {})
            self.assertEqual(doc.metadata.section_count, 0)

    def test_word_count_uses_whitespace_tokens(self):
        doc = segment("one two\tthree\r\nfour  five")
        self.assertEqual(doc.metadata.word_count, 5)

    def test_phone_formats(self):
        for sample in ("(555) 123 4567", "+62 812 3456 7890", "0812-3456-7890", "+44 20 7946 0958"):
            with self.subTest(sample=sample):
                _, has_phone, _ = detect_contact_signals(f"Call me at {sample}")
                self.assertTrue(has_phone)

        _, has_phone, _ = detect_contact_signals("Graduated in 2019")
        self.assertFalse(has_phone)


if __name__ == "__main__":
    unittest.main()
