"""Tests for the dev-profile method logging aspect."""

import logging
from unittest.mock import Mock

import pytest

from invoice.aop.logging_aspect import (
    LoggingAspect,
    get_logging_aspect,
    loggable,
    logging_aspect_configuration,
    register_logging_aspect,
)
from invoice.logging.utils import get_app_logger


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)

    @property
    def messages(self):
        return [r.getMessage() for r in self.records]


class Base:
    def describe(self, value):
        return f"base {value}"


@loggable
class Calculator(Base):
    def add(self, a, b=0):
        return a + b

    def check(self, value):
        if value < 0:
            raise ValueError("negative")
        return value

    def fail(self):
        try:
            raise KeyError("inner")
        except KeyError as exc:
            raise RuntimeError("outer") from exc

    def _helper(self):
        return "hidden"


class CountingInt(int):
    reprs = 0

    def __repr__(self):
        self.reprs += 1
        return super().__repr__()


def _configs(dev: bool):
    return Mock(accepts_profile=Mock(side_effect=lambda profile: dev and profile == "dev"))


@pytest.fixture()
def captured():
    """Attach a list handler to the module logger; loggers do not propagate."""
    handler = ListHandler()
    logger = get_app_logger(__name__)
    previous_level = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    yield handler
    logger.removeHandler(handler)
    logger.setLevel(previous_level)


@pytest.fixture(autouse=True)
def _restore_aspect():
    previous = get_logging_aspect()
    yield
    register_logging_aspect(previous)


class TestConfiguration:
    def test_registered_only_under_dev_profile(self):
        assert isinstance(logging_aspect_configuration(_configs(dev=True)), LoggingAspect)
        assert get_logging_aspect() is not None

        assert logging_aspect_configuration(_configs(dev=False)) is None
        assert get_logging_aspect() is None

    def test_without_aspect_methods_run_silently(self, captured):
        register_logging_aspect(None)
        assert Calculator().add(1, 2) == 3
        assert captured.records == []


class TestLogAround:
    def test_entry_and_exit(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=True)))

        assert Calculator().add(2, b=3) == 5
        assert captured.messages == [
            "Enter: Calculator.add() with argument[s] = [2, b=3]",
            "Exit: Calculator.add() with result = 5",
        ]

    def test_arguments_are_not_formatted_above_debug(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=True)))
        get_app_logger(__name__).setLevel(logging.INFO)
        argument = CountingInt(2)

        assert Calculator().add(argument) == 2
        assert argument.reprs == 0
        assert captured.records == []

    def test_inherited_methods_are_wrapped(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=True)))

        Calculator().describe("x")
        assert captured.messages[0] == "Enter: Calculator.describe() with argument[s] = ['x']"
        # the base class itself is untouched
        assert Base.describe is not Calculator.describe

    def test_private_methods_are_not_wrapped(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=True)))
        Calculator()._helper()
        assert captured.records == []

    def test_illegal_argument(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=True)))

        with pytest.raises(ValueError):
            Calculator().check(-1)
        assert "Illegal argument: [-1] in Calculator.check()" in captured.messages
        assert "Exception in Calculator.check() with cause = 'NULL' and exception = 'negative'" in captured.messages

    def test_exception_with_cause_in_dev(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=True)))

        with pytest.raises(RuntimeError):
            Calculator().fail()
        record = captured.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "Exception in Calculator.fail() with cause = ''inner'' and exception = 'outer'"
        assert record.exc_info is not None

    def test_exception_outside_dev_omits_details(self, captured):
        register_logging_aspect(LoggingAspect(_configs(dev=False)))

        with pytest.raises(RuntimeError):
            Calculator().fail()
        record = captured.records[-1]
        assert record.getMessage() == "Exception in Calculator.fail() with cause = 'inner'"
        assert not record.exc_info
