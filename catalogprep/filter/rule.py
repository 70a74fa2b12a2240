r"""
Filter Rules
============

A filter chain is configured with an ordered list of filter rules.
Each rule consists of a regular expression :code:`pattern`, the :code:`target` field(s) of a
catalog record the pattern is tested against and an action.
The action is either to :code:`discard` the record or to :code:`rewrite` the matching parts of
the field.

..  code-block:: yaml
    :linenos:
    :caption: Example - filter rules

    filters:
      - pattern: '^web'
        target: source
        rewrite: 'www'
      - pattern: '^cpu\.(.+)'
        target: metric
        rewrite: 'cpu_$1'
      - pattern: '^test$'
        target: origin
        discard: true

Rules are compiled once.
A rule with an unknown target or a pattern which can not be compiled is rejected and
does not take part in filtering.

.. autoclass:: catalogprep.filter.rule.FilterRule
   :members:
   :noindex:

.. automodule:: catalogprep.filter.pattern

.. automodule:: catalogprep.filter.template
"""

import re
from enum import Enum
from typing import Tuple

from attrs import define, field, validators

from catalogprep.filter.exceptions import InvalidRuleDefinitionError, UnknownTargetError
from catalogprep.filter.pattern import compile_pattern
from catalogprep.filter.template import RewriteTemplate

RECORD_FIELDS = ("origin", "source", "metric")


class Target(str, Enum):
    """Record fields a rule is allowed to inspect and modify."""

    ANY = "any"
    ORIGIN = "origin"
    SOURCE = "source"
    METRIC = "metric"

    @property
    def fields(self) -> Tuple[str, ...]:
        """Selected record fields in evaluation order."""
        if self is Target.ANY:
            return RECORD_FIELDS
        return (self.value,)


@define(kw_only=True, frozen=True)
class FilterRule:
    """A compiled filter rule."""

    pattern: str = field(validator=validators.instance_of(str))
    """The regular expression as written in the configuration"""
    compiled_pattern: re.Pattern = field(
        validator=validators.instance_of(re.Pattern), eq=False, repr=False
    )
    """The compiled regular expression"""
    target: Target = field(validator=validators.instance_of(Target), default=Target.ANY)
    """The field(s) the pattern is tested against. Defaults to :code:`any`."""
    discard: bool = field(validator=validators.instance_of(bool), default=False)
    """Drop matching records instead of rewriting them. Defaults to :code:`false`."""
    rewrite: RewriteTemplate = field(
        validator=validators.instance_of(RewriteTemplate), factory=RewriteTemplate
    )
    """Template for the replacement of matches. Ignored for discarding rules."""

    @property
    def fields(self) -> Tuple[str, ...]:
        """The record fields selected by this rule."""
        return self.target.fields

    @staticmethod
    def normalize_rule_dict(definition: dict) -> dict:
        """lower case all keys of a rule definition"""
        if not isinstance(definition, dict):
            raise InvalidRuleDefinitionError(f"rule definition is not a mapping: {definition!r}")
        normalized = {}
        for key, value in definition.items():
            if not isinstance(key, str):
                raise InvalidRuleDefinitionError(f"invalid key {key!r} in rule definition")
            normalized[key.lower()] = value
        return normalized

    @classmethod
    def from_dict(cls, definition: dict) -> "FilterRule":
        """Compile a rule from its configuration.

        The target is checked before the pattern gets compiled.

        Raises
        ------
        UnknownTargetError
            If the target is not one of :code:`any`, :code:`origin`, :code:`source`
            or :code:`metric`.
        InvalidPatternError
            If the pattern can not be compiled.
        InvalidRuleDefinitionError
            If the definition is malformed otherwise.
        """
        definition = cls.normalize_rule_dict(definition)
        unknown_keys = set(definition) - {"pattern", "target", "discard", "rewrite"}
        if unknown_keys:
            raise InvalidRuleDefinitionError(f"unknown keys in rule definition: {unknown_keys}")
        if "pattern" not in definition:
            raise InvalidRuleDefinitionError("no pattern defined")
        target = definition.get("target") or Target.ANY.value
        if not isinstance(target, str):
            raise InvalidRuleDefinitionError(f"target must be a string, got: {target!r}")
        try:
            target = Target(target)
        except ValueError as error:
            raise UnknownTargetError(target) from error
        pattern = definition["pattern"]
        if not isinstance(pattern, str):
            raise InvalidRuleDefinitionError(f"pattern must be a string, got: {pattern!r}")
        compiled_pattern = compile_pattern(pattern)
        rewrite = definition.get("rewrite")
        try:
            return cls(
                pattern=pattern,
                compiled_pattern=compiled_pattern,
                target=target,
                discard=definition.get("discard", False),
                rewrite=RewriteTemplate(template="" if rewrite is None else rewrite),
            )
        except TypeError as error:
            raise InvalidRuleDefinitionError(str(error)) from error
