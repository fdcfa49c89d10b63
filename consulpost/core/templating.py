"""Template expansion for configuration strings.

Configuration values such as ``address`` or ``token`` may reference user
variables supplied by the build pipeline::

    address: "{{ user('consul_host') }}:8500"

The upstream build tool's backtick form, ``{{user `consul_host`}}``, is
accepted too and rewritten before rendering.

Rendering runs in a sandboxed Jinja2 environment with strict undefined
handling, so a typo fails loudly instead of expanding to an empty string.
"""

from __future__ import annotations

import re
import time
import uuid
from collections.abc import Mapping

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import ImmutableSandboxedEnvironment

_BACKTICK_CALL = re.compile(r"(\w+)\s+`([^`]*)`")
_EXPRESSION = re.compile(r"\{\{.*?\}\}", re.DOTALL)
# Upstream templates call zero-argument functions without parentheses.
_BARE_CALL = re.compile(r"(?<![\w.'\"])(timestamp|uuid)\b(?!\s*\(|['\"])")


def _rewrite_expression(expression: str) -> str:
    """Translate upstream call forms inside one ``{{ }}`` expression."""
    expression = _BACKTICK_CALL.sub(r"\1('\2')", expression)
    return _BARE_CALL.sub(r"\1()", expression)


class TemplateExpansionError(RuntimeError):
    """Raised when a configuration template cannot be expanded."""


class UnknownUserVariableError(TemplateExpansionError):
    """Raised when a template references a user variable that was not set."""


class TemplateContext:
    """Expands configuration templates against one user-variable set.

    Functions available inside ``{{ }}``:

    * ``user(name)`` — value of user variable *name* (error when unset).
    * ``timestamp()`` — Unix time in seconds, fixed when the context is built.
    * ``uuid()`` — a fresh random UUID.

    The upstream forms ``{{user `name`}}``, ``{{timestamp}}`` and ``{{uuid}}``
    are rewritten into these calls before rendering.

    Parameters
    ----------
    user_variables:
        Mapping of user variable names to values.
    """

    def __init__(self, user_variables: Mapping[str, str] | None = None) -> None:
        self.user_variables: dict[str, str] = dict(user_variables or {})
        self._timestamp = str(int(time.time()))
        self._env = ImmutableSandboxedEnvironment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._env.globals.update(
            user=self._user,
            timestamp=lambda: self._timestamp,
            uuid=lambda: str(uuid.uuid4()),
        )

    def _user(self, name: str) -> str:
        try:
            return self.user_variables[name]
        except KeyError:
            raise UnknownUserVariableError(f"unknown user var: {name}") from None

    def expand(self, template: str) -> str:
        """Render *template*, raising ``TemplateExpansionError`` on failure."""
        if "{{" not in template and "{%" not in template:
            return template

        source = _EXPRESSION.sub(lambda m: _rewrite_expression(m.group(0)), template)
        try:
            return self._env.from_string(source).render()
        except TemplateExpansionError:
            raise
        except TemplateError as exc:
            raise TemplateExpansionError(str(exc)) from exc
        except Exception as exc:
            raise TemplateExpansionError(f"{type(exc).__name__}: {exc}") from exc


def expand(template: str, variables: Mapping[str, str] | None = None) -> str:
    """Expand a single template string against *variables*."""
    return TemplateContext(variables).expand(template)
