"""
Fixture metadata for the end-to-end tests.

Each `.rs` file under `tests/e2e/` declares its expectations in header comments:

    // EXPECT_EXIT: 2
    // EXPECT_ERROR: CE2009
    // EXPECT_OUTPUT_CONTAINS: "pub fn demo(x: u32) -> Self"
    // EXPECT_OUTPUT_EMPTY: true
    // CMD_ARGS: --no-std
"""

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


HEADER_LINES = 20


@dataclass
class FixtureExpectations:
    """Expected CLI behavior for one fixture file."""
    exit_code: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    output_contains: List[str] = field(default_factory=list)
    output_empty: bool = False
    cmd_args: List[str] = field(default_factory=list)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value.replace('\\n', '\n').replace('\\t', '\t')


def parse_fixture_text(content: str) -> FixtureExpectations:
    """Read expectations from the first lines of a fixture."""
    meta = FixtureExpectations()

    for line in content.split('\n')[:HEADER_LINES]:
        line = line.strip()
        if not line.startswith('//'):
            continue
        directive = line[2:].strip()
        key, sep, value = directive.partition(':')
        if not sep:
            continue
        value = value.strip()

        if key == 'EXPECT_EXIT':
            meta.exit_code = int(value)
        elif key == 'EXPECT_ERROR':
            meta.errors.append(value)
        elif key == 'EXPECT_OUTPUT_CONTAINS':
            meta.output_contains.append(_unquote(value))
        elif key == 'EXPECT_OUTPUT_EMPTY':
            meta.output_empty = value.lower() in ('true', 'yes', '1')
        elif key == 'CMD_ARGS':
            meta.cmd_args = shlex.split(value)

    return meta


def parse_fixture_metadata(path: Path) -> FixtureExpectations:
    return parse_fixture_text(path.read_text(encoding='utf-8'))


# --- parser self-checks

def test_parses_all_directives():
    meta = parse_fixture_text(
        '// EXPECT_EXIT: 2\n'
        '// EXPECT_ERROR: CE2009\n'
        '// EXPECT_ERROR: CE2002\n'
        '// EXPECT_OUTPUT_CONTAINS: "fn demo(x: u32)"\n'
        '// CMD_ARGS: --no-std --visibility "pub(crate)"\n'
        'struct S;\n'
    )
    assert meta.exit_code == 2
    assert meta.errors == ['CE2009', 'CE2002']
    assert meta.output_contains == ['fn demo(x: u32)']
    assert meta.cmd_args == ['--no-std', '--visibility', 'pub(crate)']


def test_ignores_directives_after_header():
    content = '\n' * HEADER_LINES + '// EXPECT_EXIT: 1\n'
    assert parse_fixture_text(content).exit_code is None


def test_plain_comments_are_ignored():
    meta = parse_fixture_text('// a struct with a marker field\nstruct S;\n')
    assert meta == FixtureExpectations()
