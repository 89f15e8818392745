"""
Ordered model-variant fallback.

A pass (vision or text parsing) tries each Gemini model variant strictly
after the previous one failed. What happens after a failure is decided by a
FallbackPolicy, so the policy table can be tested without a network.

File: gemini/fallback.py
Created: 2026-01-08
Last Modified: 2026-01-12
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, NamedTuple, Optional, Sequence

from .errors import ErrorKind, ExtractionAbortedError, classify_error

log = logging.getLogger(__name__)


class FallbackAction(str, Enum):
    CONTINUE = "continue"          # try the next variant
    ABANDON_PASS = "abandon_pass"  # give up on this pass, no error
    ABORT = "abort"                # raise ExtractionAbortedError


@dataclass(frozen=True)
class FallbackPolicy:
    """
    What to do after a variant fails with a given ErrorKind.

    ``on_last`` overrides ``actions`` when the failing variant is the last
    one in the list. Kinds missing from both tables continue.
    """

    name: str
    actions: Dict[ErrorKind, FallbackAction]
    on_last: Dict[ErrorKind, FallbackAction] = field(default_factory=dict)

    def decide(self, kind: ErrorKind, is_last: bool) -> FallbackAction:
        if is_last and kind in self.on_last:
            return self.on_last[kind]
        return self.actions.get(kind, FallbackAction.CONTINUE)


# A bad key or a disabled API stops the whole extraction
VISION_POLICY = FallbackPolicy(
    name="vision",
    actions={
        ErrorKind.NOT_FOUND: FallbackAction.CONTINUE,
        ErrorKind.RATE_LIMITED: FallbackAction.CONTINUE,
        ErrorKind.INVALID_CREDENTIAL: FallbackAction.ABORT,
        ErrorKind.PERMISSION_DENIED: FallbackAction.ABORT,
        ErrorKind.OTHER: FallbackAction.CONTINUE,
    },
    on_last={ErrorKind.RATE_LIMITED: FallbackAction.ABANDON_PASS},
)

# Text parsing is optional: the regex pass still runs, so nothing is fatal
PARSING_POLICY = FallbackPolicy(
    name="parsing",
    actions={
        ErrorKind.NOT_FOUND: FallbackAction.CONTINUE,
        ErrorKind.RATE_LIMITED: FallbackAction.CONTINUE,
        ErrorKind.INVALID_CREDENTIAL: FallbackAction.ABANDON_PASS,
        ErrorKind.PERMISSION_DENIED: FallbackAction.ABANDON_PASS,
        ErrorKind.OTHER: FallbackAction.CONTINUE,
    },
    on_last={ErrorKind.RATE_LIMITED: FallbackAction.ABANDON_PASS},
)

_ABORT_MESSAGES = {
    ErrorKind.INVALID_CREDENTIAL: "Gemini API key is invalid.",
    ErrorKind.PERMISSION_DENIED: (
        "Gemini API permission error. Please enable \"Generative Language API\" "
        "in Google Cloud Console."
    ),
}


class VariantResult(NamedTuple):
    variant: str
    text: str


async def run_variants(
    variants: Sequence[str],
    call: Callable[[str], Awaitable[str]],
    policy: FallbackPolicy,
    classify: Callable[[BaseException], ErrorKind] = classify_error,
) -> Optional[VariantResult]:
    """
    Try ``call(variant)`` for each variant until one succeeds.

    Args:
        variants: Model identifiers in priority order
        call: Coroutine function performing one backend request
        policy: Decides what a classified failure means
        classify: Error classifier (injectable for tests)

    Returns:
        VariantResult for the first success, or None if the pass is exhausted
        or abandoned

    Raises:
        ExtractionAbortedError: If the policy says ABORT
    """
    for index, variant in enumerate(variants):
        is_last = index == len(variants) - 1
        try:
            log.info(f"[{policy.name}] Trying model: {variant}")
            text = await call(variant)
        except Exception as e:
            kind = classify(e)
            action = policy.decide(kind, is_last)
            log.warning(
                f"[{policy.name}] Model {variant} failed ({kind.value}): {str(e)[:100]}"
            )

            if action is FallbackAction.ABORT:
                message = _ABORT_MESSAGES.get(kind, f"Gemini {kind.value} error")
                raise ExtractionAbortedError(message, kind) from e
            if action is FallbackAction.ABANDON_PASS:
                log.warning(f"[{policy.name}] Abandoning pass after {kind.value} on {variant}")
                return None
            continue

        log.info(f"[{policy.name}] Succeeded with model: {variant}")
        return VariantResult(variant, text)

    log.warning(f"[{policy.name}] All {len(variants)} model variants failed")
    return None
