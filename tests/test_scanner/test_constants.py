"""Tests for the Rust constant extractor (tsbridge.scanner.constants).

Covers:
- Recovering constants in source order, including wrapped literals
- Dropping unterminated declarations without corrupting neighbours
- Rendering and writing ``const.ts``
- Walking a crate's ``src/`` tree
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from tsbridge.errors import SourceIOError
from tsbridge.scanner.constants import (
    extract_constants,
    find_all_public_constants,
    process_constants,
    render_constants,
    write_constants,
)
from tsbridge.scanner.models import ConstantDeclaration

pytestmark = pytest.mark.unit


def _pairs(constants: list[ConstantDeclaration]) -> list[tuple[str, str]]:
    return [(c.name, c.value) for c in constants]


# ---------------------------------------------------------------------------
# extract_constants
# ---------------------------------------------------------------------------


class TestExtractConstants:
    def test_recovers_pairs_in_source_order(self):
        text = textwrap.dedent("""\
            pub const FIRST: &str = "one";
            pub const SECOND: &str = "two";
            pub const THIRD: &str = "three";
        """)
        assert _pairs(extract_constants(text)) == [
            ("FIRST", "one"),
            ("SECOND", "two"),
            ("THIRD", "three"),
        ]

    def test_literal_wrapped_onto_next_line(self):
        text = textwrap.dedent("""\
            pub const BEFORE: &str = "before";
            pub const A_VERY_LONG_CONSTANT_NAME_INDEED: &str =
                "wrapped-by-rustfmt";
            pub const AFTER: &str = "after";
        """)
        assert _pairs(extract_constants(text)) == [
            ("BEFORE", "before"),
            ("A_VERY_LONG_CONSTANT_NAME_INDEED", "wrapped-by-rustfmt"),
            ("AFTER", "after"),
        ]

    def test_indented_and_tabbed_declarations(self):
        text = 'mod inner {\n    pub const SPACED: &str = "s";\n\tpub const TABBED: &str = "t";\n}\n'
        assert _pairs(extract_constants(text)) == [("SPACED", "s"), ("TABBED", "t")]

    def test_ignores_non_string_and_private_constants(self):
        text = textwrap.dedent("""\
            pub const MAX: u32 = 3;
            const HIDDEN: &str = "hidden";
            pub static STATIC: &str = "static";
            pub const KEPT: &str = "kept";
        """)
        assert _pairs(extract_constants(text)) == [("KEPT", "kept")]

    def test_unterminated_declaration_at_eof_is_dropped(self):
        text = 'pub const GOOD: &str = "good";\npub const BROKEN: &str =\n    "never-closed"\n'
        assert _pairs(extract_constants(text)) == [("GOOD", "good")]

    def test_unterminated_declaration_does_not_corrupt_next(self):
        text = textwrap.dedent("""\
            pub const BROKEN: &str = "missing-semicolon"
            pub const NEXT: &str = "next";
            pub const LAST: &str = "last";
        """)
        assert _pairs(extract_constants(text)) == [("NEXT", "next"), ("LAST", "last")]

    def test_crlf_line_endings(self):
        text = 'pub const A: &str = "a";\r\npub const B: &str =\r\n    "b";\r\n'
        assert _pairs(extract_constants(text)) == [("A", "a"), ("B", "b")]

    def test_unicode_line_separators_stay_in_value(self):
        text = 'pub const SEP: &str = "a\u2028b";\npub const NEL: &str = "c\x85d";\n'
        assert _pairs(extract_constants(text)) == [("SEP", "a\u2028b"), ("NEL", "c\x85d")]

    def test_form_feed_inside_wrapped_value(self):
        text = 'pub const FF: &str =\n    "page\x0cbreak";\n'
        assert _pairs(extract_constants(text)) == [("FF", "page\x0cbreak")]

    def test_empty_text(self):
        assert extract_constants("") == []


# ---------------------------------------------------------------------------
# Rendering / writing
# ---------------------------------------------------------------------------


class TestRenderConstants:
    def test_one_line_per_constant(self):
        constants = [
            ConstantDeclaration(name="API_URL", value="https://example.com"),
            ConstantDeclaration(name="LOCALE", value="en-US"),
        ]
        assert render_constants(constants) == (
            'export const API_URL: string = "https://example.com";\n'
            'export const LOCALE: string = "en-US";\n'
        )

    def test_no_constants_renders_empty(self):
        assert render_constants([]) == ""

    def test_round_trip_through_source_text(self):
        source = "".join(
            f'pub const {name}: &str = "{value}";\n'
            for name, value in [("ALPHA", "a"), ("BETA", "b-b"), ("GAMMA", "c_c")]
        )
        rendered = render_constants(extract_constants(source))
        assert rendered.splitlines() == [
            'export const ALPHA: string = "a";',
            'export const BETA: string = "b-b";',
            'export const GAMMA: string = "c_c";',
        ]

    def test_write_is_byte_identical_for_identical_input(self, tmp_path: Path):
        constants = [ConstantDeclaration(name="A", value="a")]
        target = tmp_path / "const.ts"
        write_constants(constants, target)
        first = target.read_bytes()
        write_constants(constants, target)
        assert target.read_bytes() == first

    def test_write_overwrites_previous_content(self, tmp_path: Path):
        target = tmp_path / "const.ts"
        target.write_text("stale content\n", encoding="utf-8")
        write_constants([ConstantDeclaration(name="A", value="a")], target)
        assert target.read_text(encoding="utf-8") == 'export const A: string = "a";\n'


# ---------------------------------------------------------------------------
# Directory-level processing
# ---------------------------------------------------------------------------


class TestFindAllPublicConstants:
    def test_walks_src_tree_in_order(self, rust_project: Path):
        constants, report = find_all_public_constants(rust_project / "src")
        assert _pairs(constants) == [
            ("API_URL", "https://api.example.com"),
            ("DEFAULT_LOCALE", "en-US"),
            ("VERY_LONG_CONSTANT_NAME_THAT_RUSTFMT_WRAPS", "wrapped-value"),
            ("TABBED", "tabbed"),
        ]
        assert report.files_scanned == 2
        assert report.items_found == 4
        assert report.warnings == []

    def test_reports_unterminated_declaration(self, tmp_path: Path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "lib.rs").write_text('pub const OPEN: &str =\n', encoding="utf-8")
        constants, report = find_all_public_constants(src)
        assert constants == []
        assert len(report.warnings) == 1
        assert "unterminated" in report.warnings[0]

    def test_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(SourceIOError):
            find_all_public_constants(tmp_path / "missing")


class TestProcessConstants:
    def test_writes_const_ts(self, rust_project: Path, ts_project: Path):
        report = process_constants(rust_project / "src", ts_project / "src")
        content = (ts_project / "src" / "const.ts").read_text(encoding="utf-8")
        assert content.splitlines() == [
            'export const API_URL: string = "https://api.example.com";',
            'export const DEFAULT_LOCALE: string = "en-US";',
            'export const VERY_LONG_CONSTANT_NAME_THAT_RUSTFMT_WRAPS: string = "wrapped-value";',
            'export const TABBED: string = "tabbed";',
        ]
        assert report.items_found == 4
        assert report.files_changed == 1

    def test_custom_file_name(self, rust_project: Path, ts_project: Path):
        process_constants(rust_project / "src", ts_project / "src", "constants.ts")
        assert (ts_project / "src" / "constants.ts").exists()
