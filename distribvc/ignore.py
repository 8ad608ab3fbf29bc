"""
Ignore patterns for staging and status scans.

Patterns are simple globs turned into anchored regular expressions:
'.' is literal, '*' matches any run of characters (including '/'),
'?' matches one character and '[...]' is a character class ('[!...]'
negates it; an unclosed '[' is literal). A path is ignored when a
pattern matches its full repository-relative path or its basename.
A pattern ending in '/' also ignores everything below that directory.

Paths are matched as written. A symlink is judged by its own name,
never by its target.
"""

from pathlib import Path, PurePosixPath
from typing import FrozenSet, Iterable, List, Optional, Pattern, Union
import logging
import os
import re

logger = logging.getLogger(__name__)


def glob_to_regex(glob: str) -> Pattern:
    """Translate a glob into an anchored regular expression."""
    parts = []
    i, n = 0, len(glob)
    while i < n:
        char = glob[i]
        i += 1
        if char == '*':
            parts.append('.*')
        elif char == '?':
            parts.append('.')
        elif char == '[':
            end = _class_end(glob, i)
            if end < 0:
                parts.append(re.escape(char))
                continue
            body = glob[i:end].replace('\\', '\\\\').replace('[', '\\[')
            if body.startswith('!'):
                body = '^' + body[1:]
            elif body.startswith('^'):
                body = '\\' + body
            parts.append(f'[{body}]')
            i = end + 1
        else:
            parts.append(re.escape(char))
    return re.compile('^' + ''.join(parts) + '$')


def _class_end(glob: str, start: int) -> int:
    """Index of the ']' closing a class opened just before start, or -1."""
    j = start
    if j < len(glob) and glob[j] == '!':
        j += 1
    if j < len(glob) and glob[j] == ']':
        j += 1
    return glob.find(']', j)


def parse_patterns(lines: Iterable[str]) -> List[str]:
    """Keep non-blank lines that are not '#' comments, stripped."""
    patterns = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        patterns.append(line)
    return patterns


class IgnoreMatcher:
    """
    Set of ignore patterns for one repository.

    Example:
        matcher = IgnoreMatcher(root)
        matcher.load(root / ".distribvcignore")
        matcher.should_ignore(root / "logs" / "today.log")  # True with '*.log'
    """

    def __init__(self, root: Optional[Path] = None, patterns: Iterable[str] = ()):
        self.root = Path(root).resolve() if root is not None else None
        self._patterns: dict = {}
        for pattern in patterns:
            self.add_pattern(pattern)

    @property
    def patterns(self) -> FrozenSet[str]:
        return frozenset(self._patterns)

    def add_pattern(self, pattern: str) -> None:
        pattern = pattern.strip()
        if not pattern or pattern in self._patterns:
            return
        directory_only = pattern.endswith('/')
        body = pattern.rstrip('/') if directory_only else pattern
        if not body:
            return
        self._patterns[pattern] = (glob_to_regex(body), directory_only)

    def load(self, ignore_file: Path) -> int:
        """
        Merge patterns from an ignore file.

        A missing file adds nothing. Existing patterns are kept.

        Returns:
            Number of patterns read from the file
        """
        ignore_file = Path(ignore_file)
        try:
            with open(ignore_file, 'r', encoding='utf-8') as f:
                patterns = parse_patterns(f)
        except FileNotFoundError:
            logger.debug(f"No ignore file at {ignore_file}")
            return 0

        for pattern in patterns:
            self.add_pattern(pattern)
        logger.debug(f"Loaded {len(patterns)} ignore patterns from {ignore_file}")
        return len(patterns)

    def _relative(self, path: Union[str, Path]) -> str:
        path = Path(path)
        if self.root is not None and path.is_absolute():
            path = Path(os.path.abspath(path))
            try:
                return path.relative_to(self.root).as_posix()
            except ValueError:
                pass
            # the root is resolved; resolve the parent only so a link keeps its own name
            try:
                return (path.parent.resolve() / path.name).relative_to(self.root).as_posix()
            except ValueError:
                return path.as_posix()
        return PurePosixPath(*path.parts).as_posix() if path.parts else ''

    def should_ignore(self, path: Union[str, Path]) -> bool:
        """Check whether a path matches any ignore pattern."""
        rel = self._relative(path)
        if not rel or rel == '.':
            return False
        name = rel.rsplit('/', 1)[-1]
        parents = _parent_prefixes(rel)

        for regex, directory_only in self._patterns.values():
            if regex.match(rel) or regex.match(name):
                return True
            if directory_only and any(regex.match(p) or regex.match(p.rsplit('/', 1)[-1]) for p in parents):
                return True
        return False


def _parent_prefixes(rel: str) -> List[str]:
    """'a/b/c.txt' -> ['a', 'a/b']"""
    parts = rel.split('/')[:-1]
    return ['/'.join(parts[:i + 1]) for i in range(len(parts))]


def default_ignore_content(repo_dir: str, ignore_file: str, patterns: Iterable[str]) -> str:
    """Build the ignore file written when a repository is initialized.

    Args:
        repo_dir: Metadata directory name
        ignore_file: Name of the ignore file itself
        patterns: Extra default patterns

    Returns:
        File content with a trailing newline
    """
    sections = [
        _format_section("Repository metadata", [f"{repo_dir}/", ignore_file]),
    ]
    extra = [p for p in patterns if p not in (f"{repo_dir}/", ignore_file)]
    if extra:
        sections.append(_format_section("Logs and OS files", extra))
    header = "# Ignore specific files or directories"
    return header + "\n" + "\n\n".join(sections) + "\n"


def _format_section(title: str, patterns: List[str]) -> str:
    """Format a section with title and patterns."""
    return f"# {title}\n" + "\n".join(patterns)
