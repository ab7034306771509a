"""
Artifact URI decoding and path normalization.

SARIF producers report artifact locations in many shapes: file:// URIs,
percent-encoded relative paths, Windows paths with backslashes, paths with
"./" or ".." segments. Suppression globs are written against plain relative
POSIX paths, so every artifact URI is brought into that canonical form
before matching.

None of these helpers raise; malformed input degrades to the raw string.

Typical usage:
    from sarif_filter.paths import canonical_artifact_path

    canonical_artifact_path("file:///repo/src/My%20Token.sol")
    # -> "/repo/src/My Token.sol"
"""

import logging
import posixpath
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

# "file://", "https://", "vscode-remote://" ... (letters only, as producers use)
_SCHEME_PREFIX = re.compile(r"^[a-z]+://", re.IGNORECASE)

# A "%" that does not start a two-hex-digit escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def has_uri_scheme(value: str) -> bool:
    """
    Check if a string starts with a "scheme://" prefix.

    Examples:
        >>> has_uri_scheme("file:///tmp/a.sol")
        True
        >>> has_uri_scheme("src/a.sol")
        False
        >>> has_uri_scheme("C:/src/a.sol")
        False
    """
    return bool(_SCHEME_PREFIX.match(value))


def decode_uri(uri: Optional[str]) -> str:
    """
    Return the decoded path component of an artifact URI.

    Args:
        uri: A "scheme://..." URI or a bare (possibly percent-encoded) path.

    Returns:
        The percent-decoded path. If decoding fails (a "%" not followed by
        two hex digits, invalid UTF-8 escape sequences, unparsable URI) the
        raw input is returned unchanged.
        None or empty input yields "".
    """
    if not uri:
        return ""
    try:
        encoded = urlsplit(uri).path if has_uri_scheme(uri) else uri
        if _BAD_ESCAPE.search(encoded):
            logger.debug("Malformed percent-escape in artifact URI %r", uri)
            return uri
        return unquote(encoded, errors="strict")
    except ValueError as exc:
        logger.debug("Could not decode artifact URI %r: %s", uri, exc)
        return uri


def normalize_path(path: Optional[str]) -> str:
    """
    Collapse a path to its lexical normal form with forward slashes.

    Backslashes become "/", "." and ".." segments are resolved, repeated
    separators are collapsed and a leading "./" is removed.

    Examples:
        >>> normalize_path("src\\\\lib\\\\Token.sol")
        'src/lib/Token.sol'
        >>> normalize_path("./src/../lib/Math.sol")
        'lib/Math.sol'
    """
    if not path:
        return ""
    # normpath also drops a leading "./"
    normalized = posixpath.normpath(path.replace("\\", "/"))
    # but keeps exactly two leading slashes (POSIX allows them to be special)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def canonical_artifact_path(uri: Optional[str]) -> str:
    """Decode an artifact URI and normalize the resulting path for glob matching."""
    return normalize_path(decode_uri(uri))
