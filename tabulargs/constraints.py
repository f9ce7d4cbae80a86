"""
Post-scan validation: mutual exclusions first, then required options.

Exclusions
- A pair is skipped when either member is not relevant to the resolved scope.
- Both members matched: mutually exclusive violation.
- Neither matched while both are required: exactly one of them must be given.

Required options
- A relevant required option that was not matched is reported, unless it takes
  part in any exclusion pair; the pair decides for it.
"""
import logging

from . import scopes
from .faults import FaultCode
from .utils import dashed

_logger = logging.getLogger(__name__)


def spelling(option, /):
    """How an option is named in constraint messages."""
    return option.name if option.positional else dashed(option.name)


def check_exclusions(session, exclusions, fail, /):
    for exclusion in exclusions:
        one, other = map(session.lookup, exclusion.names)
        if not scopes.relevant(one, session.resolved) or not scopes.relevant(other, session.resolved):
            continue

        first, second = session.params(one), session.params(other)
        if first.is_matched and second.is_matched:
            fail(
                FaultCode.MUTUALLY_EXCLUSIVE,
                "options %r and %r are mutually exclusive, please provide only one of them"
                % (spelling(one), spelling(other)),
                option=one,
            )
        if not first.is_matched and not second.is_matched and first.is_required and second.is_required:
            fail(
                FaultCode.EXCLUSION_REQUIRED,
                "one of the options %r and %r is required because they are both required but mutually exclusive"
                % (spelling(one), spelling(other)),
                option=one,
            )


def check_required(session, exclusions, fail, /):
    for option in scopes.visible(session.options, session.resolved):
        params = session.params(option)
        if not params.is_required or params.is_matched:
            continue
        if any(exclusion.involves(option.name) for exclusion in exclusions):
            continue
        fail(FaultCode.MISSING_REQUIRED, "missing required argument %r" % spelling(option), option=option)


def check(session, exclusions, fail, /):
    """
    run every post-scan check against a finished session.

    'fail' is called as fail(code, message, **options) and must not return.
    """
    check_exclusions(session, exclusions, fail)
    check_required(session, exclusions, fail)
    _logger.debug("constraints satisfied for scope %d", session.resolved)


__all__ = (
    "spelling",
    "check_exclusions",
    "check_required",
    "check",
)
