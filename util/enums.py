# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class Difficulty(str, Enum):
    basic = "basic"
    intermediate = "intermediate"
    advanced = "advanced"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNSUPPORTED_FILE = ErrorInfo(
        "Only PDF uploads are supported", status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    )
    EMPTY_DOCUMENT = ErrorInfo(
        "No text could be extracted from the document",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    UPSTREAM_ERROR = ErrorInfo("Upstream service error", status.HTTP_502_BAD_GATEWAY)
    ANALYSIS_FAILED = ErrorInfo(
        "Model response could not be parsed. Try again or upload fewer pages.",
        status.HTTP_502_BAD_GATEWAY,
    )
