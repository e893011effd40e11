from __future__ import annotations

MALFORMED_MSG = "Malformed HTML/XML text: "


class MalformedMarkupError(ValueError):
    """
    Raised by the tag stripper when a fragment is not well-formed markup.

    A document whose fields raise this could not be indexed at all, which is a
    different outcome from a document that was indexed with empty fields.
    """

    def __init__(self, detail: str, position: int):
        super().__init__(f"{MALFORMED_MSG}{detail} (at offset {position})")
        self.detail = detail
        self.position = position


class UnterminatedTagError(MalformedMarkupError):
    pass


class InvalidTagNameError(MalformedMarkupError):
    pass


class UnmatchedClosingTagError(MalformedMarkupError):
    pass


class MismatchedTagError(MalformedMarkupError):
    def __init__(self, open_tag: str, close_tag: str, position: int):
        super().__init__(f"mismatched tags {{open: {open_tag}, close: {close_tag}}}", position)
        self.open_tag = open_tag
        self.close_tag = close_tag


class UnclosedTagError(MalformedMarkupError):
    def __init__(self, open_tags: list[str], position: int):
        super().__init__(f"unclosed tags at end of input: {', '.join(open_tags)}", position)
        self.open_tags = open_tags
