class LibraryE2EError(Exception):
    """Base class for failures raised by the library suite helpers."""


class FieldNotFillable(LibraryE2EError):
    """
    Raised when a caller insists that every field of a form was filled.
    Individual field misses are reported through FillSummary instead.
    """

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Could not fill field(s): {', '.join(self.fields)}")


class ActionNotFound(LibraryE2EError):
    def __init__(self, action: str, selectors):
        self.action = action
        self.selectors = [str(s) for s in selectors]
        super().__init__(
            f"No element found for action '{action}'. Tried: {', '.join(self.selectors)}"
        )


class TransientBrowserFailure(LibraryE2EError):
    """The page, context or browser went away while an operation was running."""


class NotFound(LibraryE2EError, AssertionError):
    def __init__(self, text: str, attempts: int, selectors_tried, screenshot=None):
        self.text = text
        self.attempts = attempts
        self.selectors_tried = list(selectors_tried)
        self.screenshot = screenshot
        message = f'"{text}" not found in list after {attempts} verification attempts'
        if self.selectors_tried:
            message += f" ({len(self.selectors_tried)} selectors tried)"
        if screenshot:
            message += f". Screenshot: {screenshot}"
        super().__init__(message)


class ValidationMessageNotFound(LibraryE2EError, AssertionError):
    def __init__(self, message: str):
        self.expected = message
        super().__init__(f'Expected error "{message}" not found on page')
