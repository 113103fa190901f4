"""Best-effort lexical cleanup of configuration text.

Removes comments and string literals so that import-like text inside them
(documentation examples, embedded shell scripts) is not picked up by the
pattern-based extractors. A single left-to-right scan decides what each
region is, so a ``#`` or ``/*`` inside a string never opens a comment and a
quote inside a comment never opens a string. This is not a tokenizer:
nested or malformed quoting can still leak through.
"""

from __future__ import annotations

import re

# Alternatives are tried in this order at each position of the scan.
TOKEN_RE = re.compile(
    r"""
    (?P<heredoc>                           # <<EOF ... EOF (optionally <<- and quoted marker)
        <<-?[ \t]*(?P<quote>['"]?)(?P<marker>[A-Za-z_]\w*)(?P=quote)[^\n]*\n
        .*?^[ \t]*(?P=marker)[ \t]*$
    )
  | (?P<indented>''(?:[^']|'(?!')|''(?=['$\\]).)*'')   # '' ... '' with ''' ''$ ''\ escapes
  | (?P<string>"(?:[^"\\\n]|\\.)*")                   # "..." on a single line
  | (?P<block>/\*.*?\*/)                                # /* ... */
  | (?P<comment>\#[^\n]*)                               # # to end of line
    """,
    re.DOTALL | re.MULTILINE | re.VERBOSE,
)


def _blank(match: re.Match) -> str:
    """Replace a match with its newlines only, keeping line numbers stable."""
    return "\n" * match.group(0).count("\n")


def sanitize(text: str, strip_inline_strings: bool = True) -> str:
    """Strip comments, here-documents and string literals from text.

    Args:
        text: Raw configuration file content.
        strip_inline_strings: Also blank single-line "..." literals. Package
            extraction keeps them because package names live in them.

    Returns:
        Text with the removed regions replaced by their newlines, and kept
        inline strings left as they were.
    """

    def replace(match: re.Match) -> str:
        if match.group("string") is not None:
            return '""' if strip_inline_strings else match.group(0)
        return _blank(match)

    return TOKEN_RE.sub(replace, text)
