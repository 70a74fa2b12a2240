r"""
Rewrite Templates
^^^^^^^^^^^^^^^^^

The :code:`rewrite` value of a filter rule is a template which is expanded for every
non-overlapping match of the rule pattern in the inspected field.

Back-references are written with a dollar sign:

.. table::

    +-------------------------+--------------------------------------------------------+
    | syntax                  | expands to                                             |
    +=========================+========================================================+
    | :code:`$1`, :code:`${1}`| the text of the numbered capture group                 |
    +-------------------------+--------------------------------------------------------+
    | :code:`$name`,          | the text of the named capture group                    |
    | :code:`${name}`         | (:code:`(?P<name>...)`)                                |
    +-------------------------+--------------------------------------------------------+
    | :code:`$$`              | a literal :code:`$`                                    |
    +-------------------------+--------------------------------------------------------+

A reference name is the longest run of letters, digits and underscores, so :code:`$1x` refers
to a group named :code:`1x`. Use :code:`${1}x` to append :code:`x` to the first group.
References to groups which do not exist or did not participate in the match expand to an empty
string. A :code:`$` which does not start a valid reference is kept literally.

..  code-block:: yaml
    :caption: Example - rename cpu metrics

    pattern: '^cpu\.(?P<rest>.+)'
    target: metric
    rewrite: 'cpu_${rest}'
"""

import re
from typing import Tuple, Union

from attrs import Factory, define, field, validators

from catalogprep.filter.pattern import replace_all

_REFERENCE = re.compile(r"\$(?:\{(\w+)\}|(\w+))")
_NUMBER = re.compile(r"[0-9]+")

Part = Tuple[str, Union[str, int]]


def _parse(template: str) -> Tuple[Part, ...]:
    """split a template into literal, index and name parts"""
    parts = []
    literal = ""
    position = 0
    while position < len(template):
        dollar = template.find("$", position)
        if dollar < 0:
            literal += template[position:]
            break
        literal += template[position:dollar]
        if template.startswith("$$", dollar):
            literal += "$"
            position = dollar + 2
            continue
        reference = _REFERENCE.match(template, dollar)
        if reference is None:
            literal += "$"
            position = dollar + 1
            continue
        if literal:
            parts.append(("literal", literal))
            literal = ""
        name = reference.group(1) or reference.group(2)
        parts.append(("index", int(name)) if _NUMBER.fullmatch(name) else ("name", name))
        position = reference.end()
    if literal:
        parts.append(("literal", literal))
    return tuple(parts)


@define(kw_only=True, frozen=True)
class RewriteTemplate:
    """A compiled rewrite template."""

    template: str = field(validator=validators.instance_of(str), default="")
    """The template source text"""
    parts: tuple = field(
        init=False,
        eq=False,
        repr=False,
        default=Factory(lambda self: _parse(self.template), takes_self=True),
    )

    def expand(self, match: re.Match) -> str:
        """Return the replacement text for one match."""
        result = []
        for kind, value in self.parts:
            if kind == "literal":
                result.append(value)
            elif kind == "index":
                if value <= match.re.groups:
                    result.append(match.group(value) or "")
            elif value in match.re.groupindex:
                result.append(match.group(value) or "")
        return "".join(result)

    def apply(self, pattern: re.Pattern, value: str) -> str:
        """Replace all matches of :code:`pattern` in :code:`value` by this template."""
        return replace_all(pattern, value, self.expand)
