#!/usr/bin/env python3
"""
Text-splicing edits for the TypeScript sources a new style has to be registered in.

The splice_* functions work on strings and raise PatchNotApplicable when the
anchor is missing, ambiguous, or the entry is already there. The file-level
functions wrap them: read the whole file, splice, and replace the file in one
write. They return a PatchResult instead of raising, so a caller can carry on
with its other targets.

These are offset-based edits, not a parser. Anchors are expected to be unique
and well formed in the target document.
"""
import os
import re
import shutil
import logging
import tempfile
from enum import Enum
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from style_adder.errors import PatchNotApplicable

logger = logging.getLogger(__name__)

CLOSING_BRACE = '};'
QUOTED_ENTRY = re.compile(r"(['\"])([\w-]+)\1")

# blank, // or block-comment-only line
_NON_CODE_LINE = re.compile(r'^\s*(//.*|/\*.*|\*.*)?$')
_TRAILING_COMMENT = re.compile(r'\s+//.*$|\s*/\*.*?\*/\s*$')


class PatchStatus(str, Enum):
    APPLIED = 'applied'
    ANCHOR_NOT_FOUND = 'anchor_not_found'
    AMBIGUOUS_ANCHOR = 'ambiguous_anchor'
    ALREADY_PRESENT = 'already_present'
    FILE_MISSING = 'file_missing'
    FAILED = 'failed'


@dataclass
class PatchResult:
    path: Path
    status: PatchStatus
    detail: str = ''

    @property
    def inserted(self) -> bool:
        return self.status is PatchStatus.APPLIED


# --- Escaping helpers ---

def escape_template_literal(text: str) -> str:
    """Escapes text for use inside a JS/TS `template literal`."""
    return text.replace('\\', '\\\\').replace('`', '\\`').replace('${', '\\${')


def escape_single_quoted(text: str) -> str:
    """Escapes text for use inside a JS/TS 'single quoted' string."""
    return (text.replace('\\', '\\\\').replace("'", "\\'")
            .replace('\r', '\\r').replace('\n', '\\n'))


# --- Pure text splices ---

def _newline(content: str) -> str:
    return '\r\n' if '\r\n' in content else '\n'


def _match_newlines(content: str, text: str) -> str:
    nl = _newline(content)
    return text.replace('\r\n', '\n').replace('\n', nl) if nl != '\n' else text


def _check_not_present(content: str, skip_if: str | re.Pattern | None):
    if skip_if is None:
        return
    pattern = skip_if if isinstance(skip_if, re.Pattern) else re.compile(skip_if, re.MULTILINE)
    if pattern.search(content):
        raise PatchNotApplicable(PatchStatus.ALREADY_PRESENT, f"Entry matching '{pattern.pattern}' already present")


def _with_separator(head: str) -> str:
    """
    Adds a comma after the last entry before the splice point when it has none.
    Blank lines, comment lines and a trailing comment on the entry's own line
    are stepped over, so the comma lands on the code.
    """
    lines = re.findall(r'[^\n]*\n|[^\n]+\Z', head)
    for i in range(len(lines) - 1, -1, -1):
        line = lines[i]
        body = line.rstrip('\r\n')
        if _NON_CODE_LINE.match(body):
            continue
        code = _TRAILING_COMMENT.sub('', body).rstrip()
        if not code or code[-1] in ',{[':
            return head
        lines[i] = code + ',' + line[len(code):]
        return ''.join(lines)
    return head


def _splice_at(content: str, index: int, snippet: str) -> str:
    snippet = _match_newlines(content, snippet)
    nl = _newline(content)
    if not snippet.endswith(nl):
        snippet += nl
    return _with_separator(content[:index]) + snippet + content[index:]


def splice_before_last_closing_brace(content: str, snippet: str, skip_if=None) -> str:
    _check_not_present(content, skip_if)
    index = content.rfind(CLOSING_BRACE)
    if index == -1:
        raise PatchNotApplicable(PatchStatus.ANCHOR_NOT_FOUND, f"No '{CLOSING_BRACE}' found")
    return _splice_at(content, index, snippet)


def splice_before_block_end(content: str, block_marker: str, snippet: str, skip_if=None) -> str:
    _check_not_present(content, skip_if)
    occurrences = content.count(block_marker)
    if occurrences == 0:
        raise PatchNotApplicable(PatchStatus.ANCHOR_NOT_FOUND, f"'{block_marker}' not found")
    if occurrences > 1:
        raise PatchNotApplicable(PatchStatus.AMBIGUOUS_ANCHOR,
                                 f"'{block_marker}' found {occurrences} times")
    index = content.find(CLOSING_BRACE, content.index(block_marker))
    if index == -1:
        raise PatchNotApplicable(PatchStatus.ANCHOR_NOT_FOUND,
                                 f"No '{CLOSING_BRACE}' after '{block_marker}'")
    return _splice_at(content, index, snippet)


def splice_after_last_matching_line(content: str, predicate: Callable[[str], bool],
                                    new_line: str, skip_if=None) -> str:
    _check_not_present(content, skip_if)
    lines = re.findall(r'[^\n]*\n|[^\n]+\Z', content)
    last_index = None
    for i, line in enumerate(lines):
        if predicate(line):
            last_index = i
    if last_index is None:
        raise PatchNotApplicable(PatchStatus.ANCHOR_NOT_FOUND, "No line matched the anchor")

    nl = _newline(content)
    new_line = new_line.rstrip('\r\n')
    anchor = lines[last_index]
    if anchor.endswith(('\n', '\r')):
        lines.insert(last_index + 1, new_line + nl)
    else:
        # anchor is the final line and has no line break
        lines[last_index] = anchor + nl + new_line
    return ''.join(lines)


def _category_pattern(category_id: str) -> re.Pattern:
    # id: '<category>' ... styles: [ <entries> ]  within one object literal
    return re.compile(
        r"(id:\s*(['\"])" + re.escape(category_id) + r"\2[^}]*?styles:\s*\[)([^\]]*)(\])",
        re.DOTALL,
    )


def splice_category_style(content: str, category_id: str, style_key: str) -> str:
    matches = list(_category_pattern(category_id).finditer(content))
    if not matches:
        raise PatchNotApplicable(PatchStatus.ANCHOR_NOT_FOUND, f"Category '{category_id}' not found")
    if len(matches) > 1:
        raise PatchNotApplicable(PatchStatus.AMBIGUOUS_ANCHOR,
                                 f"Category '{category_id}' found {len(matches)} times")

    match = matches[0]
    raw_entries = match.group(3)
    entries = [key for _, key in QUOTED_ENTRY.findall(raw_entries)]
    if style_key in entries:
        raise PatchNotApplicable(PatchStatus.ALREADY_PRESENT,
                                 f"Style '{style_key}' already in category '{category_id}'")
    # the array is rewritten on one line; anything but quoted keys would be lost
    leftover = QUOTED_ENTRY.sub('', raw_entries)
    if leftover.replace(',', '').strip():
        raise PatchNotApplicable(PatchStatus.AMBIGUOUS_ANCHOR,
                                 f"Styles of category '{category_id}' hold more than quoted keys: "
                                 f"{leftover.replace(',', '').strip()[:40]!r}")

    quote = '"' if raw_entries.lstrip().startswith('"') else "'"
    entries.append(style_key)
    rewritten = ', '.join(f"{quote}{e}{quote}" for e in entries)
    return content[:match.start(3)] + rewritten + content[match.end(3):]


# --- File wrappers ---

def _write_atomic(path: Path, content: str):
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except Exception:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _patch_file(path, transform: Callable[[str], str]) -> PatchResult:
    path = Path(path)
    if not path.is_file():
        logger.warning(f"File not found: {path}")
        return PatchResult(path, PatchStatus.FILE_MISSING, f"File not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
        new_content = transform(content)
        _write_atomic(path, new_content)
    except PatchNotApplicable as e:
        logger.warning(f"Skipped {path.name}: {e.detail}")
        return PatchResult(path, e.status, e.detail)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to patch {path}: {e}")
        return PatchResult(path, PatchStatus.FAILED, str(e))
    logger.info(f"Updated {path}")
    return PatchResult(path, PatchStatus.APPLIED)


def insert_before_last_closing_brace(path, snippet: str, skip_if=None) -> PatchResult:
    return _patch_file(path, lambda c: splice_before_last_closing_brace(c, snippet, skip_if))


def insert_before_block_end(path, block_marker: str, snippet: str, skip_if=None) -> PatchResult:
    return _patch_file(path, lambda c: splice_before_block_end(c, block_marker, snippet, skip_if))


def insert_after_last_matching_line(path, predicate: Callable[[str], bool],
                                    new_line: str, skip_if=None) -> PatchResult:
    return _patch_file(path, lambda c: splice_after_last_matching_line(c, predicate, new_line, skip_if))


def append_to_category_style_list(path, category_id: str, style_key: str) -> PatchResult:
    """Adds style_key to the `styles` array of the category whose id is category_id."""
    return _patch_file(path, lambda c: splice_category_style(c, category_id, style_key))
