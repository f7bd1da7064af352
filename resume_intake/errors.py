"""Error taxonomy for the resume intake pipeline.

Every error carries a human-readable ``message`` that is safe to show to the
uploading recruiter and the HTTP status the API layer renders it with.
"""


class ResumeIntakeError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(ResumeIntakeError):
    """Rejected before any network call: wrong file type, missing fields."""

    status_code = 400


class ExtractionError(ResumeIntakeError):
    """The uploaded bytes could not be parsed as a PDF."""

    status_code = 422


class AuthError(ResumeIntakeError):
    status_code = 401


class RemoteServiceError(ResumeIntakeError):
    """The language model call failed."""

    status_code = 500


class ParseError(RemoteServiceError):
    """The language model answered, but not with a decodable JSON object."""


class PersistenceError(ResumeIntakeError):
    status_code = 500


class NotFoundError(ResumeIntakeError):
    status_code = 404
