from __future__ import annotations

from typing import List


class ScadDotsError(Exception):
    """Base class for every recoverable error raised by scad_dots."""

    default_message = "scad_dots error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    def context(self, message: str) -> "ScadDotsError":
        """Return a copy of this error with an added message, chained to the original."""

        wrapped = type(self).__new__(type(self))
        Exception.__init__(wrapped, message)
        wrapped.__dict__.update(self.__dict__)
        wrapped.__cause__ = self
        return wrapped


class RotationError(ScadDotsError):
    default_message = "Failed to compute rotation"


class ChainError(ScadDotsError):
    default_message = "Need at least 2 elements to chain"


class SnakeError(ScadDotsError):
    default_message = "Invalid snake axis order"


class MidpointError(ScadDotsError):
    default_message = "A Midpoint can only be made from 2 Corners."


class DimensionError(ScadDotsError, ValueError):
    default_message = "Invalid dimensions"


class ArgsError(ScadDotsError, ValueError):
    default_message = "Invalid argument(s)"


class RatioError(ScadDotsError, ValueError):
    def __init__(self, value: float, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Invalid ratio: {value}")


class ParseError(ScadDotsError):
    default_message = "Failed to parse openscad code"


class TestError(ScadDotsError):
    """Raised by the model harness when a temporary action is left in place."""

    __test__ = False
    default_message = "Change the harness action back to Test."


class ModelMismatchError(ScadDotsError, AssertionError):
    default_message = "Models don't match"


def error_chain(exc: BaseException) -> List[str]:
    """Return the messages of `exc` and its causes, outermost first."""

    messages: List[str] = []
    seen = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current))
        current = current.__cause__
    return messages
