#!/usr/bin/env python3
"""Exceptions raised while adding a style."""


class StyleAdderError(Exception):
    """Base class for fatal style-adder failures."""


class UsageError(StyleAdderError):
    """Missing or malformed command line input."""


class TemplateNotFoundError(StyleAdderError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No prompt template found for style key '{key}'")


class GenerationError(StyleAdderError):
    """The preview could not be generated or the response was unusable."""


class DownloadError(StyleAdderError):
    """The preview asset could not be saved locally."""


class PatchNotApplicable(Exception):
    """
    Raised by the text splice functions when a document cannot be patched.
    Not fatal: the file wrappers turn it into a PatchResult.
    """
    def __init__(self, status, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(detail)
