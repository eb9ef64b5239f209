from typing import Any, Optional


class TaskSenderError(Exception):
    """Failure surfaced to the caller as a message plus optional details"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {"error": True, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class SchemaReadError(TaskSenderError):
    pass


class NoTitleFieldError(TaskSenderError):
    status_code = 400


class NoDateFieldError(TaskSenderError):
    status_code = 400


class UnsupportedPropertyError(TaskSenderError):
    status_code = 400


class PageWriteError(TaskSenderError):
    pass
