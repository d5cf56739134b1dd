"""Tests for structure-aware truncation."""

from jamf_docs_mcp.core.content import (
    Section,
    build_truncation_notice,
    estimate_tokens,
    truncate_to_token_limit,
)
from jamf_docs_mcp.core.content.truncation import TRUNCATION_MARKER

# 39 characters plus newline: 10 tokens per line
FILLER_LINE = "x" * 39


def _document() -> str:
    first = "\n".join([FILLER_LINE] * 50)
    second = "\n".join([FILLER_LINE] * 50)
    return f"# First\n{first}\n# Second\n{second}"


class TestTruncateToTokenLimit:
    """Tests for truncate_to_token_limit()."""

    def test_within_budget_unchanged(self):
        """Test that small documents are returned as-is."""
        result = truncate_to_token_limit("# Short\nbody", 100)
        assert result.content == "# Short\nbody"
        assert result.token_info.truncated is False
        assert result.remaining_sections is None

    def test_exact_budget_unchanged(self):
        """Test that a document costing exactly the budget is not cut."""
        text = "abcd" * 25
        assert estimate_tokens(text) == 25
        assert truncate_to_token_limit(text, 25).token_info.truncated is False

    def test_cuts_on_line_boundary(self):
        """Test that kept content is a prefix made of whole lines."""
        doc = _document()
        result = truncate_to_token_limit(doc, 200)
        body = result.content.split("\n\n---\n\n*[Content truncated")[0]
        assert doc.startswith(body)
        assert body.endswith(FILLER_LINE)
        assert result.token_info.truncated is True

    def test_lists_remaining_sections(self):
        """Test that omitted sections are named in the notice."""
        result = truncate_to_token_limit(_document(), 200)
        assert [s.id for s in result.remaining_sections] == ["second"]
        assert "**Remaining sections:**" in result.content
        assert "- Second (~" in result.content

    def test_token_info_prices_whole_output(self):
        """Test that the reported count includes the notice."""
        result = truncate_to_token_limit(_document(), 200)
        assert result.token_info.token_count == estimate_tokens(result.content)
        assert result.token_info.max_tokens == 200

    def test_closes_open_code_fence(self):
        """Test that a cut inside a code block still yields balanced fences."""
        doc = "# Code\n```bash\n" + "echo hello world line\n" * 100 + "```\n# After\ntext"
        result = truncate_to_token_limit(doc, 100)
        assert result.token_info.truncated is True
        assert result.content.count("```") % 2 == 0

    def test_fence_closed_before_notice(self):
        """Test that the closing fence precedes the truncation notice."""
        doc = "```\n" + "code line here\n" * 200 + "```"
        result = truncate_to_token_limit(doc, 100)
        body = result.content.split("\n\n---\n\n")[0]
        assert body.endswith("```")

    def test_code_only_body_within_budget(self):
        """Test that fenced code is priced at the code ratio while cutting."""
        doc = "```\n" + "echo some shell command here ok\n" * 400 + "```"
        result = truncate_to_token_limit(doc, 1000)
        body = result.content.split(TRUNCATION_MARKER)[0]
        assert result.token_info.truncated is True
        assert body.endswith("```")
        assert estimate_tokens(body) <= 1000

    def test_cut_on_opening_fence(self):
        """Test that a block which does not start before the cut adds no fence."""
        prose = "\n".join([FILLER_LINE] * 9)
        doc = prose + "\n```bash\n" + "echo hello\n" * 50 + "```\n" + prose
        result = truncate_to_token_limit(doc, 100)
        body = result.content.split(TRUNCATION_MARKER)[0]
        assert body == prose
        assert result.content.count("```") == 0

    def test_cut_after_closing_fence(self):
        """Test that a block closed just before the cut is not closed again."""
        code = "\n".join(["x" * 29] * 8)
        doc = f"```\n{code}\n```\n" + "\n".join([FILLER_LINE] * 20)
        result = truncate_to_token_limit(doc, 100)
        body = result.content.split(TRUNCATION_MARKER)[0]
        assert body == f"```\n{code}\n```"
        assert result.content.count("```") == 2


class TestBuildTruncationNotice:
    """Tests for build_truncation_notice()."""

    def test_marker_only_without_sections(self):
        """Test the bare marker when nothing remains."""
        notice = build_truncation_notice([])
        assert notice == "\n\n---\n\n*[Content truncated due to token limit]*\n"

    def test_overflow_count(self):
        """Test that more than ten sections are summarized."""
        sections = [Section(id=f"s{i}", title=f"S{i}", level=2, token_count=5) for i in range(12)]
        notice = build_truncation_notice(sections)
        assert "  - S0 (~5 tokens)" in notice
        assert "S10" not in notice
        assert "*...and 2 more sections*" in notice
        assert notice.endswith("*Use the `section` parameter to retrieve specific sections.*")
