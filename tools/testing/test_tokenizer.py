"""
Test feature-word tokenization.

Run: python tools/testing/test_tokenizer.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from searchterm_optimizer.tokenizer import STOP_WORDS, split_to_feature_words


def test_splits_on_whitespace():
    words = split_to_feature_words("magnesium gummies for adults")
    assert words == ["magnesium", "gummies", "adults"], words


def test_filters_stop_words():
    words = split_to_feature_words("magnesium for the adults")
    assert "for" not in words and "the" not in words
    assert words == ["magnesium", "adults"], words


def test_hyphenated_words_drop_single_letters():
    assert split_to_feature_words("sugar-free vitamin-c") == ["sugar", "free", "vitamin"]


def test_pure_numbers_dropped_alphanumerics_kept():
    words = split_to_feature_words("vitamin d3 5000 iu")
    assert words == ["vitamin", "d3", "iu"], words


def test_punctuation_delimiters():
    words = split_to_feature_words("Kids' Vitamins (Gummy)|50ct & more+extra[x]{y}!?;:")
    assert words == ["kids", "vitamins", "gummy", "50ct", "more", "extra"], words


def test_lowercases():
    assert split_to_feature_words("Organic MATCHA Powder") == ["organic", "matcha", "powder"]


def test_overlong_tokens_dropped():
    long_word = "x" * 51
    assert split_to_feature_words(f"tea {long_word}") == ["tea"]
    assert split_to_feature_words("y" * 50) == ["y" * 50]


def test_empty_and_none():
    assert split_to_feature_words("") == []
    assert split_to_feature_words(None) == []
    assert split_to_feature_words("  --  ") == []


def test_duplicates_preserved_in_order():
    assert split_to_feature_words("tea green tea") == ["tea", "green", "tea"]


def test_same_input_same_output():
    s = "Best organic green-tea bags, 100 count"
    assert split_to_feature_words(s) == split_to_feature_words(s)


def test_stop_word_set():
    assert len(STOP_WORDS) == 43
    assert "not" in STOP_WORDS and "no" not in STOP_WORDS


if __name__ == "__main__":
    tests = [v for k, v in list(globals().items()) if k.startswith("test_") and callable(v)]
    failed = 0
    for t in tests:
        try:
            t()
            print(f"✅ PASS: {t.__name__}")
        except AssertionError as e:
            failed += 1
            print(f"❌ FAIL: {t.__name__}: {e}")
    print("=" * 60)
    print("✅ ALL TESTS PASSED" if failed == 0 else f"❌ {failed} TESTS FAILED")
    raise SystemExit(1 if failed else 0)
