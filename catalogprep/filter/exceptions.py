"""This module contains exceptions for filter rules."""

from catalogprep.abc.exceptions import CatalogprepException


class FilterConfigurationError(CatalogprepException):
    """Base class for exceptions raised while compiling a filter rule."""


class InvalidRuleDefinitionError(FilterConfigurationError):
    """Raise if a rule definition is malformed."""


class UnknownTargetError(FilterConfigurationError):
    """Raise if a rule names a target that is not known."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"unknown `{target}' filter target")


class InvalidPatternError(FilterConfigurationError):
    """Raise if the pattern of a rule can not be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"unable to compile filter pattern `{pattern}': {reason}")
