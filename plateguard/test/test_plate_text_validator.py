import pytest

from plateguard.domain.Models.detection_result import FailureReason
from plateguard.domain.Models.plate import PlateCandidate
from plateguard.domain.Models.recognition import RecognitionOutput, RecognizedWord
from plateguard.domain.Services.plate_text_validator import check_acceptance
from plateguard.infrastructure.Normalizer.plate_normalizer import PlateNormalizer


def test_normalizer_strips_separators_and_uppercases():
    normalizer = PlateNormalizer()
    assert normalizer.normalize("ab-12 cd!") == "AB12CD"
    assert normalizer.normalize("  n.123/45 ") == "N12345"
    assert normalizer.normalize("") == ""
    assert normalizer.normalize("!!@#") == ""


def test_low_confidence_word_dropped_before_shape_matching(validator):
    output = RecognitionOutput(
        full_text="AB12CD noise",
        confidence=66.0,
        words=[RecognizedWord("AB12CD", 92.0), RecognizedWord("noise", 40.0)],
    )
    assert validator.validate(output) == PlateCandidate("AB12CD", 92.0)


def test_word_at_exactly_sixty_is_dropped(validator):
    output = RecognitionOutput("XYZ", 50.0, [RecognizedWord("ABC123", 60.0)])
    candidate = validator.validate(output)
    # falls back to the full text
    assert candidate == PlateCandidate("XYZ", 50.0)


def test_highest_confidence_shape_wins(validator):
    output = RecognitionOutput(
        full_text="",
        confidence=80.0,
        words=[
            RecognizedWord("ABC123", 75.0),
            RecognizedWord("123ABC", 88.0),
            RecognizedWord("??", 99.0),
        ],
    )
    assert validator.validate(output).normalized_text == "123ABC"


def test_equal_confidence_keeps_recognition_order(validator):
    output = RecognitionOutput(
        full_text="",
        confidence=0.0,
        words=[RecognizedWord("KL55AB", 85.0), RecognizedWord("AB12CD", 85.0)],
    )
    assert validator.validate(output).normalized_text == "KL55AB"


def test_shapes(validator):
    assert validator.is_plate_shaped("ABC1234")
    assert validator.is_plate_shaped("12AB")
    assert validator.is_plate_shaped("ab-12-cd")
    assert validator.is_plate_shaped("A1B2C")          # generic 5-8
    assert not validator.is_plate_shaped("A1")          # too short
    assert not validator.is_plate_shaped("A1B2")        # no shape, under 5
    assert not validator.is_plate_shaped("ABCDEFGHIJ")  # over 8 letters


def test_fallback_is_lenient_with_unshaped_text(validator):
    # Known permissive case: the full text is used even though it matches
    # no plate shape. Acceptance then only looks at length and confidence.
    output = RecognitionOutput("WELCOME TO THE CAR PARK", 91.0, [])
    candidate = validator.validate(output)
    assert candidate.normalized_text == "WELCOMETOTHECARPARK"
    assert check_acceptance(candidate, min_length=3, min_confidence=70) is None


def test_validate_never_raises_on_empty_output(validator):
    candidate = validator.validate(RecognitionOutput("", 0.0, []))
    assert candidate == PlateCandidate("", 0.0)
    assert check_acceptance(candidate) is FailureReason.NO_PLATE_DETECTED


def test_confidence_rounds_half_up(validator):
    output = RecognitionOutput("", 0.0, [RecognizedWord("ABC123", 69.5)])
    assert validator.validate(output).confidence == 70.0


def test_confidence_gate_threshold_is_inclusive():
    assert check_acceptance(PlateCandidate("ABC123", 69.0), 3, 70) is FailureReason.LOW_CONFIDENCE
    assert check_acceptance(PlateCandidate("ABC123", 70.0), 3, 70) is None
    assert check_acceptance(PlateCandidate("ABC123", 65.0), 3, 70) is FailureReason.LOW_CONFIDENCE


def test_length_gate_checked_first():
    assert check_acceptance(PlateCandidate("A1", 99.0), 3, 70) is FailureReason.NO_PLATE_DETECTED
    assert check_acceptance(PlateCandidate("A1", 10.0), 3, 70) is FailureReason.NO_PLATE_DETECTED


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_overall_confidence_counts_as_zero(validator, bad):
    candidate = validator.validate(RecognitionOutput("ABC123", bad, []))
    assert candidate == PlateCandidate("ABC123", 0.0)
    assert check_acceptance(candidate, 3, 70) is FailureReason.LOW_CONFIDENCE


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_word_confidence_is_dropped(validator, bad):
    output = RecognitionOutput(
        full_text="ABC123 XY99ZZ",
        confidence=81.0,
        words=[RecognizedWord("ABC123", bad), RecognizedWord("XY99ZZ", 75.0)],
    )
    assert validator.validate(output) == PlateCandidate("XY99ZZ", 75.0)
