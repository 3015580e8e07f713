"""
Serbian Cyrillic/Latin transliteration helpers.
"""

from django.test import SimpleTestCase

from apps.common.transliteration import (
    cyrillic_to_latin,
    enhanced_search,
    highlight_patterns,
    highlight_text,
    latin_to_cyrillic,
    slugify_text,
)


class TransliterationTestCase(SimpleTestCase):
    def test_cyrillic_to_latin_drops_diacritics(self):
        self.assertEqual(cyrillic_to_latin("Општина Чачак"), "Opstina Cacak")
        self.assertEqual(cyrillic_to_latin("Љубовија, Њујорк, Ђурђевдан"), "Ljubovija, Njujork, Djurdjevdan")

    def test_latin_to_cyrillic_handles_digraphs_first(self):
        self.assertEqual(latin_to_cyrillic("ljubav"), "љубав")
        self.assertEqual(latin_to_cyrillic("Njegoš"), "Његош")
        self.assertEqual(latin_to_cyrillic("džep"), "џеп")

    def test_non_serbian_characters_pass_through(self):
        self.assertEqual(cyrillic_to_latin("2024 — OK!"), "2024 — OK!")


class EnhancedSearchTestCase(SimpleTestCase):
    def test_direct_match_is_case_insensitive(self):
        self.assertTrue(enhanced_search("Градска Библиотека", "библиотека"))

    def test_latin_query_finds_cyrillic_content(self):
        self.assertTrue(enhanced_search("Општинска управа", "opstinska"))
        self.assertTrue(enhanced_search("Општинска управа", "uprava"))

    def test_cyrillic_query_finds_latin_content(self):
        self.assertTrue(enhanced_search("Opštinska uprava", "управа"))

    def test_blank_inputs_never_match(self):
        self.assertFalse(enhanced_search("", "x"))
        self.assertFalse(enhanced_search("text", ""))
        self.assertFalse(enhanced_search(None, "x"))

    def test_no_match(self):
        self.assertFalse(enhanced_search("Музеј", "skola"))


class HighlightTestCase(SimpleTestCase):
    def test_patterns_are_unique(self):
        self.assertEqual(highlight_patterns("muzej"), ["muzej", "музеј"])
        self.assertEqual(highlight_patterns("123"), ["123"])

    def test_highlight_wraps_matches_in_both_scripts(self):
        result = highlight_text("Музеј и muzej", "muzej")
        self.assertEqual(result, "<mark>Музеј</mark> и <mark>muzej</mark>")

    def test_highlight_escapes_html(self):
        self.assertEqual(highlight_text("<b>x</b>", ""), "&lt;b&gt;x&lt;/b&gt;")


class SlugifyTestCase(SimpleTestCase):
    def test_cyrillic_title(self):
        self.assertEqual(slugify_text("Општинска управа 2024"), "opstinska-uprava-2024")

    def test_latin_diacritics_fold(self):
        self.assertEqual(slugify_text("Čačak – Šabac, Žabalj"), "cacak-sabac-zabalj")

    def test_max_length_trims_trailing_dash(self):
        self.assertEqual(slugify_text("abc def", max_length=4), "abc")
