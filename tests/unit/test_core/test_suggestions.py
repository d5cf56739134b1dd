"""Tests for no-result search suggestions."""

from jamf_docs_mcp.core.suggestions import (
    extract_keywords,
    find_alternative_keywords,
    find_relevant_topics,
    format_search_suggestions,
    generate_search_suggestions,
    generate_tips,
    simplify_query,
)


class TestExtractKeywords:
    """Tests for extract_keywords()."""

    def test_drops_stop_words_and_punctuation(self):
        """Test keyword extraction."""
        assert extract_keywords("How do I set up SSO?") == ["set", "sso"]

    def test_drops_single_characters(self):
        """Test that one-letter words are ignored."""
        assert extract_keywords("a b filevault") == ["filevault"]

    def test_keeps_hyphens(self):
        """Test that hyphenated terms survive."""
        assert extract_keywords("sign-in issues") == ["sign-in", "issues"]


class TestSimplifyQuery:
    """Tests for simplify_query()."""

    def test_long_query_reduced_to_three_keywords(self):
        """Test simplification of verbose queries."""
        assert simplify_query("how to configure sso for jamf connect users") == "configure sso connect"

    def test_short_query_not_simplified(self):
        """Test that two keywords are left alone."""
        assert simplify_query("filevault recovery") is None


class TestAlternatives:
    """Tests for synonym lookup."""

    def test_forward_synonyms(self):
        """Test synonyms of a known keyword."""
        assert find_alternative_keywords("sso") == [
            "single sign-on",
            "authentication",
            "identity",
            "login",
        ]

    def test_reverse_lookup(self):
        """Test that a synonym maps back to its key."""
        assert "config" in find_alternative_keywords("configuration")

    def test_capped_at_five(self):
        """Test the alternative count limit."""
        assert len(find_alternative_keywords("sso mdm deploy")) == 5

    def test_unknown_keyword(self):
        """Test that unknown words have no alternatives."""
        assert find_alternative_keywords("zzzz") == []


class TestRelevantTopics:
    """Tests for find_relevant_topics()."""

    def test_best_topic_first(self):
        """Test that the topic named after the keyword ranks first."""
        topics = find_relevant_topics("enrollment")
        assert topics[0].id == "enrollment"
        assert len(topics) <= 3

    def test_no_match(self):
        """Test that unrelated queries suggest no topics."""
        assert find_relevant_topics("zzzz qqqq") == []


class TestTips:
    """Tests for generate_tips()."""

    def test_toc_tip_always_last(self):
        """Test that browsing the TOC is always suggested."""
        tips = generate_tips("sso", has_filters=False)
        assert tips == ["Browse the table of contents with `jamf_docs_get_toc`"]

    def test_filters_and_quotes(self):
        """Test tips for filtered and quoted queries."""
        tips = generate_tips('"exact phrase"', has_filters=True)
        assert "Try removing filters to broaden your search" in tips
        assert "Try removing quotes for a broader search" in tips

    def test_many_keywords(self):
        """Test the tip for long queries."""
        tips = generate_tips("one two three four five six", has_filters=False)
        assert tips[0] == "Try using fewer, more specific keywords"


class TestFormatSearchSuggestions:
    """Tests for format_search_suggestions()."""

    def test_layout(self):
        """Test the rendered suggestion block."""
        suggestions = generate_search_suggestions("sso login problems with okta", has_topic_filter=True)
        output = format_search_suggestions("sso login problems with okta", suggestions)
        assert output.startswith('No results found for "sso login problems with okta"\n\n## Search Suggestions\n\n')
        assert "**Try simpler query**: `sso login problems`" in output
        assert "**Alternative keywords**: `single sign-on`" in output
        assert "**Tips**:\n" in output
        assert "- Try removing filters to broaden your search\n" in output

    def test_topic_lines(self):
        """Test that suggested topics render as filter hints."""
        output = format_search_suggestions("enrollment", generate_search_suggestions("enrollment"))
        assert '- `topic="enrollment"` - Enrollment & Onboarding\n' in output
