"""
Tests for synonym expansion.
"""

from baynav.smart.reference import ReferenceCatalog, detect_program_categories
from baynav.smart.synonyms import SYNONYMS, expand_query_with_synonyms


class TestExpansion:

    def test_single_word(self):
        assert expand_query_with_synonyms("help") == "help assistance support program"

    def test_lowercases_and_keeps_query_words_first(self):
        terms = expand_query_with_synonyms("Veteran HOUSING").split()
        assert terms[:2] == ["veteran", "housing"]
        assert "military" in terms
        assert "rent" in terms

    def test_multi_word_synonyms_are_split(self):
        terms = expand_query_with_synonyms("snap").split()
        assert "food" in terms
        assert "stamps" in terms
        assert "food stamps" not in terms

    def test_no_duplicates(self):
        terms = expand_query_with_synonyms("senior seniors senior").split()
        assert len(terms) == len(set(terms))

    def test_unknown_words_pass_through(self):
        assert expand_query_with_synonyms("where can someone like me go") == "where can someone like me go"

    def test_detected_keywords_folded_in(self, catalog):
        terms = expand_query_with_synonyms("I need food help", catalog).split()
        for term in catalog.program_categories["food"].search_keywords.split():
            assert term in terms

    def test_explicit_detections_override_catalog(self, catalog):
        detections = detect_program_categories("rent", catalog)
        terms = expand_query_with_synonyms("zzz", catalog, detections=detections).split()
        assert terms[0] == "zzz"
        assert "eviction" in terms

    def test_empty_catalog_uses_table_only(self):
        assert expand_query_with_synonyms("help", ReferenceCatalog.empty()) == "help assistance support program"


class TestCap:

    def test_capped_at_max_terms(self, catalog):
        query = "senior veteran disabled food housing utilities transportation health childcare tax legal"
        terms = expand_query_with_synonyms(query, catalog).split()
        assert len(terms) == 30
        assert terms[:11] == query.split()

    def test_custom_cap(self):
        assert expand_query_with_synonyms("food", max_terms=3) == "food groceries meals"

    def test_re_expansion_keeps_existing_terms(self, catalog):
        """Expanding an expansion keeps every earlier term in front, in order."""
        first = expand_query_with_synonyms("senior transportation in 94612", catalog)
        second = expand_query_with_synonyms(first, catalog)
        first_terms = first.split()
        assert second.split()[:len(first_terms)] == first_terms
        assert len(second.split()) <= 30

    def test_re_expansion_at_cap_is_stable(self, catalog):
        query = "senior veteran disabled food housing utilities transportation health childcare tax legal"
        first = expand_query_with_synonyms(query, catalog)
        assert expand_query_with_synonyms(first, catalog) == first


class TestTable:

    def test_table_entries_are_lowercase(self):
        for word in SYNONYMS:
            assert word == word.lower()
