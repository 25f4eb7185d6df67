"""Exception hierarchy for the detection engine.

None of these reach the caller of a detector: evidence failures are
replaced with zero evidence, malformed values are clamped or defaulted,
and detector failures become the detector's canonical failed result.
"""


class DetectionError(Exception):
    """Base detection error."""
    pass


class EvidenceUnavailable(DetectionError):
    """An external judgment call failed or returned unusable data."""
    pass


class MalformedSegment(DetectionError):
    """A probability or similarity value is non-numeric."""

    def __init__(self, raw: object):
        self.raw = raw
        super().__init__(f"Malformed numeric value: {str(raw)[:50]!r}")


class DetectorFailure(DetectionError):
    """Unexpected exception inside a detector pipeline."""

    def __init__(self, detector: str, cause: BaseException):
        self.detector = detector
        self.cause = cause
        super().__init__(f"{detector} failed: {type(cause).__name__}: {cause}")


class JudgmentError(EvidenceUnavailable):
    """Base error of the generative judgment client."""
    pass


class JudgmentTimeoutError(JudgmentError):
    """Judgment request timed out."""
    pass


class JudgmentConnectionError(JudgmentError):
    """Judgment endpoint unreachable or returned an HTTP error."""
    pass


class JudgmentValidationError(JudgmentError):
    """Judgment response could not be parsed or validated."""
    pass
