"""Line-oriented detection of broken internal links, anchors and cross-references."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

from link_rectifier.config import DEFAULT_INCLUDE_EXTENSIONS
from link_rectifier.index import (
    STATUS_ANCHOR_MISSING,
    STATUS_CROSS_REFERENCE_TARGET_MISSING,
    STATUS_INTERNAL_TARGET_MISSING,
    BrokenLinkRecord,
    FileResult,
    ValidationResultSet,
    generate_anchor,
    iter_unfenced_lines,
    match_heading,
)
from link_rectifier.security import (
    PathBlockedError,
    SecurityLimits,
    exists_with_exact_case,
    is_file_readable,
    resolve_link_target,
)

KIND_INLINE = "inline"
KIND_DEFINITION = "definition"

INLINE_LINK_PATTERN = re.compile(
    r"!?\[[^\]]*\]\(\s*(?:<(?P<angle>[^>]*)>|(?P<bare>[^)\s]+))(?:\s+[\"'(][^)]*)?\)"
)
DEFINITION_PATTERN = re.compile(
    r"^\s{0,3}\[(?P<label>[^\]^][^\]]*)\]:\s*(?:<(?P<angle>[^>]*)>|(?P<bare>\S+))"
)
CODE_SPAN_PATTERN = re.compile(r"`[^`]*`")
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
ANCHOR_TAG_PATTERN = re.compile(r"<a\s+[^>]*?(?:name|id)=[\"'](?P<id>[^\"']+)[\"']", re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class LinkReference:
    """A link target as written on one line."""

    line: int
    url: str
    kind: str


def iter_link_references(content: str) -> Iterator[LinkReference]:
    """Yield inline links and reference definitions outside fenced code blocks."""
    for line_number, line in iter_unfenced_lines(content):
        visible = CODE_SPAN_PATTERN.sub(lambda match: " " * len(match.group(0)), line)
        definition = DEFINITION_PATTERN.match(visible)
        if definition is not None:
            url = definition.group("angle")
            if url is None:
                url = definition.group("bare")
            yield LinkReference(line=line_number, url=url, kind=KIND_DEFINITION)
            continue
        for match in INLINE_LINK_PATTERN.finditer(visible):
            url = match.group("angle")
            if url is None:
                url = match.group("bare")
            yield LinkReference(line=line_number, url=url, kind=KIND_INLINE)


def collect_anchors(content: str) -> frozenset[str]:
    """Return anchors GitHub would accept for this document.

    Repeated headings get '-1', '-2' suffixes; explicit <a name/id> tags count.
    """
    anchors: set[str] = set()
    counts: dict[str, int] = {}
    for _, line in iter_unfenced_lines(content):
        heading = match_heading(line)
        if heading is not None:
            base = generate_anchor(heading[1])
            count = counts.get(base, 0)
            counts[base] = count + 1
            anchors.add(base if count == 0 else f"{base}-{count}")
        for tag in ANCHOR_TAG_PATTERN.finditer(line):
            anchors.add(tag.group("id"))
    return frozenset(anchors)


def is_external(url: str) -> bool:
    """Return True for urls carrying a scheme such as https: or mailto:."""
    return SCHEME_PATTERN.match(url) is not None and not re.match(r"^[a-zA-Z]:[\\/]", url)


class LinkDetector:
    """Builds a ValidationResultSet for a list of markup files."""

    def __init__(
        self,
        limits: SecurityLimits | None = None,
        include_extensions: tuple[str, ...] = DEFAULT_INCLUDE_EXTENSIONS,
    ) -> None:
        self._limits = limits or SecurityLimits()
        self._include_extensions = include_extensions
        self._anchor_cache: dict[Path, frozenset[str] | None] = {}

    def detect(self, paths: Iterable[Path]) -> ValidationResultSet:
        """Scan every file; files without broken links are still listed."""
        result_set = ValidationResultSet()
        for path in paths:
            result_set.add(self.scan_file(path.resolve()))
        return result_set

    def scan_file(self, path: Path) -> FileResult:
        file_result = FileResult(path=str(path))
        content = self._read(path)
        if content is None:
            return file_result
        for reference in iter_link_references(content):
            status = self.check_reference(path, reference)
            if status is None:
                continue
            file_result.broken_links.append(
                BrokenLinkRecord(url=reference.url, line=reference.line, status=status)
            )
        return file_result

    def check_reference(self, source: Path, reference: LinkReference) -> str | None:
        """Return the broken-link status for a reference, or None when it resolves."""
        url = reference.url.strip()
        if not url or is_external(url):
            return None
        file_part, has_fragment, fragment = url.partition("#")
        if file_part:
            try:
                target = resolve_link_target(source, file_part)
            except PathBlockedError:
                return None
            if not exists_with_exact_case(target):
                if reference.kind == KIND_DEFINITION:
                    return STATUS_CROSS_REFERENCE_TARGET_MISSING
                return STATUS_INTERNAL_TARGET_MISSING
            if not has_fragment or not fragment:
                return None
            if not target.is_file() or target.suffix.lower() not in self._include_extensions:
                return None
        else:
            if not fragment:
                return None
            target = source

        anchors = self._anchors_for(target)
        if anchors is None:
            return None
        if fragment in anchors or unquote(fragment) in anchors:
            return None
        return STATUS_ANCHOR_MISSING

    def _anchors_for(self, path: Path) -> frozenset[str] | None:
        if path not in self._anchor_cache:
            content = self._read(path)
            self._anchor_cache[path] = None if content is None else collect_anchors(content)
        return self._anchor_cache[path]

    def _read(self, path: Path) -> str | None:
        if not is_file_readable(path, self._limits):
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
