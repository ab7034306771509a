# Glob-to-regex translation for suppression file patterns.
# Supports "*" (any run of characters within one path segment) and "**"
# (anything, across separators, including nothing).

from __future__ import annotations

import re

# Escaped forms of the wildcard tokens after re.escape(). The alternation
# order is significant: "**/" and "**" must be tried before "*" so a double
# star is never split into two single stars.
_ESCAPED_WILDCARD = re.compile(r"\\\*\\\*/|\\\*\\\*|\\\*")

_REPLACEMENTS = {
    r"\*\*/": "(?:.*/)?",
    r"\*\*": ".*",
    r"\*": "[^/]*",
}


def glob_to_regex(glob: str) -> re.Pattern[str]:
    """
    Compile a restricted glob into a whole-string regex.

    Everything except the wildcard tokens is matched literally.

    Examples:
        >>> bool(glob_to_regex("a/*.sol").fullmatch("a/Foo.sol"))
        True
        >>> bool(glob_to_regex("a/*.sol").fullmatch("a/b/Foo.sol"))
        False
        >>> bool(glob_to_regex("a/**/*.sol").fullmatch("a/Foo.sol"))
        True
    """
    escaped = re.escape(str(glob))
    translated = _ESCAPED_WILDCARD.sub(lambda m: _REPLACEMENTS[m.group(0)], escaped)
    return re.compile(translated)


def glob_matches(pattern: re.Pattern[str], path: str) -> bool:
    """
    True if path (already normalized) satisfies the compiled glob.

    Absolute paths get a second chance with their leading slashes removed,
    so "src/**" also matches "/src/Token.sol".
    """
    if pattern.fullmatch(path):
        return True
    stripped = path.lstrip("/")
    return stripped != path and pattern.fullmatch(stripped) is not None
