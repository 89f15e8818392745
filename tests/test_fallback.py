import pytest

from smartscan.gemini import (
    PARSING_POLICY,
    VISION_POLICY,
    ErrorKind,
    ExtractionAbortedError,
    FallbackAction,
    classify_error,
    run_variants,
)

from conftest import (
    VARIANTS,
    FakeAPIError,
    invalid_key,
    not_found,
    permission_denied,
    rate_limited,
    run,
)


@pytest.mark.parametrize(
    "exc, kind",
    [
        (not_found(), ErrorKind.NOT_FOUND),
        (rate_limited(), ErrorKind.RATE_LIMITED),
        (invalid_key(), ErrorKind.INVALID_CREDENTIAL),
        (permission_denied(), ErrorKind.PERMISSION_DENIED),
        (FakeAPIError(401, "UNAUTHENTICATED"), ErrorKind.INVALID_CREDENTIAL),
        (FakeAPIError(500, "INTERNAL"), ErrorKind.OTHER),
        (FakeAPIError(400, "INVALID_ARGUMENT. Unsupported MIME type"), ErrorKind.OTHER),
        (RuntimeError("model gemini-x not found"), ErrorKind.NOT_FOUND),
        (RuntimeError("Quota exceeded for metric"), ErrorKind.RATE_LIMITED),
        (RuntimeError("Permission denied on resource"), ErrorKind.PERMISSION_DENIED),
        (TimeoutError("timed out"), ErrorKind.OTHER),
    ],
)
def test_classify_error(exc, kind):
    assert classify_error(exc) == kind


def test_vision_policy_table():
    assert VISION_POLICY.decide(ErrorKind.NOT_FOUND, False) is FallbackAction.CONTINUE
    assert VISION_POLICY.decide(ErrorKind.RATE_LIMITED, False) is FallbackAction.CONTINUE
    assert VISION_POLICY.decide(ErrorKind.RATE_LIMITED, True) is FallbackAction.ABANDON_PASS
    assert VISION_POLICY.decide(ErrorKind.INVALID_CREDENTIAL, False) is FallbackAction.ABORT
    assert VISION_POLICY.decide(ErrorKind.PERMISSION_DENIED, True) is FallbackAction.ABORT
    assert VISION_POLICY.decide(ErrorKind.OTHER, False) is FallbackAction.CONTINUE


def test_parsing_policy_never_aborts():
    for kind in ErrorKind:
        for is_last in (False, True):
            assert PARSING_POLICY.decide(kind, is_last) is not FallbackAction.ABORT
    assert PARSING_POLICY.decide(ErrorKind.INVALID_CREDENTIAL, False) is FallbackAction.ABANDON_PASS


def _scripted(outcomes):
    calls = []

    async def call(variant):
        calls.append(variant)
        outcome = outcomes[variant]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return call, calls


def test_run_variants_skips_failures_until_success():
    call, calls = _scripted({"model-a": not_found(), "model-b": RuntimeError("boom"), "model-c": "{}"})

    result = run(run_variants(VARIANTS, call, VISION_POLICY))

    assert result.variant == "model-c"
    assert result.text == "{}"
    assert calls == VARIANTS


def test_run_variants_stops_at_first_success():
    call, calls = _scripted({"model-a": "ok", "model-b": "unused", "model-c": "unused"})

    result = run(run_variants(VARIANTS, call, VISION_POLICY))

    assert result.variant == "model-a"
    assert calls == ["model-a"]


def test_rate_limit_on_last_variant_abandons_without_raising():
    call, calls = _scripted({v: rate_limited() for v in VARIANTS})

    assert run(run_variants(VARIANTS, call, VISION_POLICY)) is None
    assert calls == VARIANTS


def test_invalid_key_aborts_vision_pass():
    call, calls = _scripted({"model-a": invalid_key(), "model-b": "ok", "model-c": "ok"})

    with pytest.raises(ExtractionAbortedError) as excinfo:
        run(run_variants(VARIANTS, call, VISION_POLICY))

    assert excinfo.value.kind is ErrorKind.INVALID_CREDENTIAL
    assert "invalid" in str(excinfo.value)
    assert calls == ["model-a"]


def test_invalid_key_only_skips_parsing_pass():
    call, calls = _scripted({"model-a": permission_denied(), "model-b": "ok", "model-c": "ok"})

    assert run(run_variants(VARIANTS, call, PARSING_POLICY)) is None
    assert calls == ["model-a"]


def test_injected_classifier_drives_the_loop():
    call, calls = _scripted({v: ValueError("anything") for v in VARIANTS})

    def always_fatal(exc):
        return ErrorKind.PERMISSION_DENIED

    with pytest.raises(ExtractionAbortedError):
        run(run_variants(VARIANTS, call, VISION_POLICY, classify=always_fatal))
    assert calls == ["model-a"]
