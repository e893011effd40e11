from __future__ import annotations

from typing import List

from blog_docs_index.errors import (
    InvalidTagNameError,
    MismatchedTagError,
    UnclosedTagError,
    UnmatchedClosingTagError,
    UnterminatedTagError,
)

_END_OF_NAME = frozenset("\t\n\v\r\f />")


def tag_name(text: str, start: int = 0) -> str:
    """
    Return the tag name that begins at ``start`` (the character right after ``<`` or ``</``).
    """
    index = start
    while index < len(text) and text[index] not in _END_OF_NAME:
        index += 1
    if index == start:
        raise InvalidTagNameError("a valid tag name must follow the '<' character", start)
    return text[start:index]


def matching_end(text: str, start: int = 0) -> int:
    """
    Return the index of the ``>`` closing the tag scanned from ``start``.

    Double-quoted attribute values may contain ``<`` and ``>``, so those are skipped.
    """
    inside_quotes = False
    for index in range(start, len(text)):
        char = text[index]
        if char == '"':
            inside_quotes = not inside_quotes
        elif char == ">" and not inside_quotes:
            return index
    raise UnterminatedTagError("tag is missing its closing '>'", start)


def strip_tags(text: str) -> str:
    """
    Remove every HTML/XML tag from ``text`` and return the remaining characters in order.

    Nested tags are tracked on a stack so mismatched or unclosed tags are rejected
    instead of producing wrong text:

        strip_tags('<div>This is <em>important</em>!</div>') == 'This is important!'

    Runs in a single pass over the input.
    """
    stack: List[str] = []
    out: List[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != "<":
            out.append(char)
            index += 1
            continue

        if index + 1 >= length:
            raise UnterminatedTagError("'<' character without a tag definition", index)

        if text[index + 1] == "/":
            if index + 2 >= length:
                raise UnterminatedTagError("'</' character without a tag definition", index)
            name = tag_name(text, index + 2)
            if not stack:
                raise UnmatchedClosingTagError(f"closing tag </{name}> without an opening match", index)
            top = stack.pop()
            if top != name:
                raise MismatchedTagError(top, name, index)
            index = matching_end(text, index + 2) + 1
        else:
            name = tag_name(text, index + 1)
            end = matching_end(text, index + 1 + len(name))
            # self-closing tags never get a matching close
            if text[end - 1] != "/":
                stack.append(name)
            index = end + 1

    if stack:
        raise UnclosedTagError(list(stack), length)
    return "".join(out)
