"""
Tests for slug generation
"""

from prasempre.utils.slug_generator import (
    SUFFIX_ALPHABET,
    generate_slug,
    is_valid_slug,
    normalize_name,
    random_suffix,
)


def test_couple_slug():
    assert generate_slug("Ana", "João", suffix="x7k2") == "ana-e-joao-x7k2"


def test_single_name_slug():
    assert generate_slug("Rex", suffix="ab12") == "rex-ab12"


def test_accents_and_symbols_are_dropped():
    assert normalize_name("Zoë & Beyoncé") == "zoebeyonce"
    assert normalize_name("  Maria Clara ") == "mariaclara"


def test_unusable_name_falls_back():
    assert generate_slug("!!!", None, suffix="abcd") == "pagina-abcd"
    assert generate_slug("Ana", "???", suffix="abcd") == "ana-abcd"


def test_long_names_are_truncated():
    slug = generate_slug("a" * 80, "b" * 80, suffix="zzzz")
    assert slug == f"{'a' * 40}-e-{'b' * 40}-zzzz"
    assert is_valid_slug(slug)


def test_random_suffix():
    suffix = random_suffix()
    assert len(suffix) == 4
    assert all(ch in SUFFIX_ALPHABET for ch in suffix)


def test_generated_slugs_are_valid():
    assert is_valid_slug(generate_slug("Ana", "João"))


def test_slug_validation():
    assert is_valid_slug("ana-e-joao-x7k2")
    assert not is_valid_slug("ab")
    assert not is_valid_slug("Ana-e-Joao")
    assert not is_valid_slug("ana e joao")
    assert not is_valid_slug(None)
    assert not is_valid_slug(123)
