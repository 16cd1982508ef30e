"""
Domain errors raised by the training core.

Duration estimation and streak computation are total and have no error type.
"""


class RoutineError(Exception):
    """Base class for routine normalization failures."""


class MalformedPayloadError(RoutineError, ValueError):
    """The raw routine payload could not be parsed into a JSON object."""


class EmptyRoutineError(RoutineError):
    """The payload parsed but contained zero exercise blocks."""


class SessionAlreadyFinishedError(Exception):
    """A training session was finished twice."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is already finished")
