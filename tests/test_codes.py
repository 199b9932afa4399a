import random

import pytest

from sysdes.shortener.codes import CHARACTERS, DEFAULT_LENGTH, HashGenerator


@pytest.fixture
def gen():
    return HashGenerator(random.Random(1234))


def test_short_code_shape_and_registration(gen):
    code = gen.generate_short_code()
    assert len(code) == DEFAULT_LENGTH
    assert all(c in CHARACTERS for c in code)
    assert gen.is_code_used(code)
    assert gen.used_codes_count() == 1


def test_short_code_custom_length(gen):
    assert len(gen.generate_short_code(10)) == 10


def test_short_codes_are_unique(gen):
    codes = [gen.generate_short_code(2) for _ in range(200)]
    assert len(set(codes)) == 200
    assert gen.used_codes_count() == 200


def test_from_url_is_deterministic_across_generators():
    a = HashGenerator(random.Random(1)).generate_from_url("http://example.com")
    b = HashGenerator(random.Random(2)).generate_from_url("http://example.com")
    assert a == b
    assert len(a) == DEFAULT_LENGTH
    assert all(c in CHARACTERS for c in a)


def test_from_url_falls_back_when_taken(gen):
    first = gen.generate_from_url("http://example.com")
    second = gen.generate_from_url("http://example.com")
    assert first != second
    assert gen.is_code_used(first) and gen.is_code_used(second)
    assert gen.used_codes_count() == 2


@pytest.mark.parametrize(
    "code, accepted",
    [
        ("abc123", True),
        ("A" * 20, True),
        ("A" * 21, False),
        ("", False),
        ("bad-code", False),
        ("with space", False),
    ],
)
def test_custom_code_validation(gen, code, accepted):
    assert gen.generate_custom_code(code) is accepted
    assert gen.is_code_used(code) is accepted


def test_custom_code_rejected_when_used(gen):
    assert gen.generate_custom_code("mine")
    assert not gen.generate_custom_code("mine")
    assert gen.used_codes_count() == 1


def test_remove_and_clear(gen):
    gen.add_used_code("one")
    gen.add_used_code("two")
    gen.remove_used_code("one")
    assert not gen.is_code_used("one")
    assert gen.is_code_used("two")
    gen.remove_used_code("absent")
    assert gen.used_codes_count() == 1
    gen.clear_used_codes()
    assert gen.used_codes_count() == 0