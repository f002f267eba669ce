"""Referral code generation."""

from cryptoex.referral.codes import REF_CODE_ALPHABET, generate_ref_code, generate_unique_ref_code


def test_alphabet_has_no_ambiguous_characters():
    assert len(REF_CODE_ALPHABET) == 32
    assert not set("01IO") & set(REF_CODE_ALPHABET)


def test_generated_code_shape():
    code = generate_ref_code()
    assert len(code) == 8
    assert set(code) <= set(REF_CODE_ALPHABET)


def test_unique_code_skips_taken():
    draws = iter(["TAKEN222", "FRESH222"])
    code = generate_unique_ref_code({"TAKEN222"}, generator=lambda length: next(draws))
    assert code == "FRESH222"


def test_unique_code_gives_up_after_max_attempts():
    calls = []

    def always_taken(length):
        calls.append(length)
        return "TAKEN222"

    code = generate_unique_ref_code({"TAKEN222"}, max_attempts=3, generator=always_taken)

    assert code == "TAKEN222"
    assert len(calls) == 3
