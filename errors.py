"""
Failures a form submission can end with.

Each error carries the HTTP status and the short message shown to the caller.
Internal detail stays in the server log.
"""


class SubmissionError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MalformedInput(SubmissionError):
    """Request body is not a JSON object of text fields."""
    status_code = 400
    message = "Invalid request body"


class ValidationError(SubmissionError):
    """A required booking field is missing or empty."""
    status_code = 400
    message = "All fields are required"


class DuplicateBooking(SubmissionError):
    """The (email, date) pair is already booked."""
    status_code = 409
    message = "You already booked a consultation for this date"


class PersistenceFailure(SubmissionError):
    pass


class NotificationFailure(SubmissionError):
    pass
