"""Unit tests for changelog parsing and aggregation."""

from __future__ import annotations

import logging

import pytest

from fleet_release.core.changelog import (
    SECTION_HEADLINES,
    Changelog,
    ChangelogSection,
    aggregate_changelogs,
    parse_changelog,
)
from fleet_release.exceptions import ChangelogValidationError

PR_URL = "https://github.com/sonata-project/SonataAdminBundle/pull/42"
USER_URL = "https://github.com/alice"


def parse(body: str | None, number: int = 42) -> dict[str, list[str]]:
    return parse_changelog(
        body,
        number=number,
        html_url=PR_URL,
        login="alice",
        user_html_url=USER_URL,
    )


class TestParseChangelog:
    """Tests for parse_changelog()."""

    def test_single_section(self):
        """Lines are rendered with pull request and author links."""
        body = "## Changelog\n```markdown\n### Changed\n- fixed a thing\n```"

        assert parse(body) == {
            "Changed": [f"- [#42]({PR_URL}) Fixed a thing (@alice)({USER_URL})"],
        }

    def test_no_fence_returns_empty(self):
        """A body without a markdown fence has no changelog."""
        assert parse("## Changelog\n\n### Fixed\n- something") == {}

    def test_no_heading_returns_empty(self):
        """The fence must follow a Changelog heading."""
        assert parse("```markdown\n### Fixed\n- something\n```") == {}

    @pytest.mark.parametrize("body", [None, ""])
    def test_empty_body(self, body: str | None):
        """Pull requests without body have no changelog."""
        assert parse(body) == {}

    def test_multiple_sections(self):
        """Lines are grouped under the preceding heading."""
        body = (
            "I am targeting this branch, because this is a fix.\n\n"
            "## Changelog\n\n"
            "```markdown\n"
            "### Added\n"
            "- Added `Foo::bar()`\n"
            "\n"
            "### Fixed\n"
            "- Fixed a crash\n"
            "- fixed another crash\n"
            "```\n"
        )

        changelog = parse(body)

        assert list(changelog) == ["Added", "Fixed"]
        assert changelog["Added"] == [f"- [#42]({PR_URL}) Added `Foo::bar()` (@alice)({USER_URL})"]
        assert changelog["Fixed"] == [
            f"- [#42]({PR_URL}) Fixed a crash (@alice)({USER_URL})",
            f"- [#42]({PR_URL}) Fixed another crash (@alice)({USER_URL})",
        ]

    def test_html_comments_are_ignored(self):
        """Template hints in HTML comments never end up in the changelog."""
        body = (
            "<!-- Describe your change\n"
            "## Changelog\n"
            "```markdown\n### Removed\n- the template example\n```\n"
            "-->\n"
            "## Changelog\n"
            "```markdown\n"
            "### Fixed\n"
            "<!-- one line per change -->\n"
            "- real change\n"
            "```"
        )

        assert parse(body) == {
            "Fixed": [f"- [#42]({PR_URL}) Real change (@alice)({USER_URL})"],
        }

    def test_lines_before_first_heading_are_discarded(self):
        """Text without a section has nowhere to go."""
        body = "## Changelog\n```markdown\n- orphan\n### Fixed\n- kept\n```"

        assert parse(body) == {"Fixed": [f"- [#42]({PR_URL}) Kept (@alice)({USER_URL})"]}

    def test_heading_markers_are_stripped(self):
        """Any number of # and one space are removed from headings."""
        body = "## Changelog\n```markdown\n# Added\n- one\n#### Fixed\n- two\n```"

        assert list(parse(body)) == ["Added", "Fixed"]

    def test_unknown_headlines_are_kept(self):
        """Headlines are validated later, during aggregation."""
        body = "## Changelog\n```markdown\n### Bogus\n- whatever\n```"

        assert list(parse(body)) == ["Bogus"]

    def test_lines_without_list_marker(self):
        """Lines without a leading dash are used as they are."""
        body = "## Changelog\n```markdown\n### Fixed\nplain line\n```"

        assert parse(body) == {"Fixed": [f"- [#42]({PR_URL}) Plain line (@alice)({USER_URL})"]}

    def test_case_insensitive_markers(self):
        """The heading and fence language are matched case-insensitively."""
        body = "## changelog\n```Markdown\n### Fixed\n- x\n```"

        assert list(parse(body)) == ["Fixed"]

    def test_windows_line_endings(self):
        """CRLF bodies parse like LF ones."""
        body = "## Changelog\r\n```markdown\r\n### Fixed\r\n- thing\r\n```"

        assert parse(body) == {"Fixed": [f"- [#42]({PR_URL}) Thing (@alice)({USER_URL})"]}

    def test_idempotent(self):
        """Parsing the same body twice gives the same result."""
        body = "## Changelog\n```markdown\n### Fixed\n- thing\n```"

        assert parse(body) == parse(body)


class TestChangelogSection:
    """Tests for ChangelogSection."""

    @pytest.mark.parametrize("headline", SECTION_HEADLINES)
    def test_canonical_headlines(self, headline: str):
        """The five canonical headlines are accepted."""
        section = ChangelogSection(headline, ("- line",))
        assert section.headline == headline

    @pytest.mark.parametrize("headline", ["Bogus", "fixed", "", " Added"])
    def test_invalid_headline_raises(self, headline: str):
        """Any other headline is rejected."""
        with pytest.raises(ChangelogValidationError):
            ChangelogSection(headline, ("- line",))

    def test_no_lines_raises(self):
        """A section needs at least one line."""
        with pytest.raises(ChangelogValidationError):
            ChangelogSection("Fixed", ())

    def test_blank_line_raises(self):
        """Lines must not be blank."""
        with pytest.raises(ChangelogValidationError):
            ChangelogSection("Fixed", ("- line", "  "))

    def test_as_markdown(self):
        """Sections render as a level three heading followed by the lines."""
        section = ChangelogSection("Fixed", ("- one", "- two"))
        assert section.as_markdown() == "### Fixed\n- one\n- two"


class TestChangelog:
    """Tests for Changelog."""

    def test_as_markdown(self):
        """Headline, blank line, then sections separated by blank lines."""
        changelog = Changelog(
            "1.2.0",
            (
                ChangelogSection("Added", ("- a",)),
                ChangelogSection("Fixed", ("- b", "- c")),
            ),
        )

        assert changelog.as_markdown() == "1.2.0\n\n### Added\n- a\n\n### Fixed\n- b\n- c\n"

    def test_empty_headline_raises(self):
        with pytest.raises(ChangelogValidationError):
            Changelog(" ")

    def test_without_sections(self):
        changelog = Changelog("1.2.0")

        assert changelog.is_empty()
        assert changelog.as_markdown() == "1.2.0\n"


class TestAggregateChangelogs:
    """Tests for aggregate_changelogs()."""

    def test_merges_in_pull_request_order(self):
        """Lines of the same section are concatenated in the given order."""
        changelog = aggregate_changelogs(
            "1.2.0",
            [
                {"Fixed": ["- first"]},
                {"Fixed": ["- second"], "Added": ["- feature"]},
            ],
        )

        assert [section.headline for section in changelog.sections] == ["Added", "Fixed"]
        assert changelog.sections[1].lines == ("- first", "- second")
        assert changelog.headline == "1.2.0"

    def test_sections_are_sorted(self):
        """Sections are sorted regardless of insertion order."""
        changelogs = [{"Removed": ["- r"], "Changed": ["- c"], "Deprecated": ["- d"]}]

        changelog = aggregate_changelogs("2.0.0", changelogs)

        assert [s.headline for s in changelog.sections] == ["Changed", "Deprecated", "Removed"]

    def test_deterministic(self):
        """The same input gives byte-identical markdown."""
        first = [{"Fixed": ["- b"]}, {"Added": ["- a"]}]
        second = [{"Fixed": ["- b"]}, {"Added": ["- a"]}]

        assert (
            aggregate_changelogs("1.0.1", first).as_markdown()
            == aggregate_changelogs("1.0.1", second).as_markdown()
        )

    def test_empty_sections_are_dropped(self):
        changelog = aggregate_changelogs("1.0.1", [{"Fixed": []}, {"Added": ["- a"]}])

        assert [s.headline for s in changelog.sections] == ["Added"]

    def test_unknown_sections_are_dropped(self, caplog: pytest.LogCaptureFixture):
        """Only the offending section is dropped, with a warning."""
        with caplog.at_level(logging.WARNING, logger="fleet_release"):
            changelog = aggregate_changelogs(
                "1.0.1",
                [{"Bogus": ["- nope"], "Fixed": ["- yes"]}],
            )

        assert [s.headline for s in changelog.sections] == ["Fixed"]
        assert "Bogus" in caplog.text

    def test_repeated_lines_are_kept_once(self):
        changelog = aggregate_changelogs("1.0.1", [{"Fixed": ["- a"]}, {"Fixed": ["- a", "- b"]}])

        assert changelog.sections[0].lines == ("- a", "- b")

    def test_no_changelogs(self):
        """Pull requests without changelog give an empty changelog."""
        assert aggregate_changelogs("1.0.1", [{}, {}]).is_empty()

    def test_parsed_pull_request(self):
        """A parsed pull request body ends up as its section."""
        parsed = parse("## Changelog\n```markdown\n### Changed\n- fixed a thing\n```")

        changelog = aggregate_changelogs("1.1.1", [parsed])

        assert changelog.sections == (
            ChangelogSection("Changed", (f"- [#42]({PR_URL}) Fixed a thing (@alice)({USER_URL})",)),
        )
