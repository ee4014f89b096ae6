"""
Message Formatting
------------------
Log calls in the wild use two templating conventions, sometimes mixed:

  log.info("user {0} logged in", name)     positional
  log.info("user %s logged in", name)      printf

Pipeline (each stage returns a FormatResult, nothing raises):
  1. No arguments           → the template, untouched
  2. `{0`..`{3` in template → positional substitution; success wins
  3. printf substitution on the ORIGINAL template; success wins
  4. Otherwise              → the template, untouched
"""

from typing import Any, Sequence

from logstash_formatter.services.positional import format_positional
from logstash_formatter.services.printf import format_printf

# The base formatter only attempts positional substitution when one of
# these markers is present.
_POSITIONAL_MARKERS = ("{0", "{1", "{2", "{3")


def has_positional_marker(template: str) -> bool:
    return any(marker in template for marker in _POSITIONAL_MARKERS)


def format_message(template: str, parameters: Sequence[Any] | None) -> str:
    if not parameters:
        return template

    if has_positional_marker(template):
        positional = format_positional(template, parameters)
        if positional.ok:
            return positional.text

    printf = format_printf(template, parameters)
    if printf.ok:
        return printf.text

    return template
