"""
Test analysis config validation and YAML loading.

Run: python tools/testing/test_config.py
"""

import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pydantic import ValidationError

from searchterm_optimizer.config import (
    DEFAULT_PARAMETERS,
    AnalysisConfig,
    ConfigError,
    load_analysis_config,
    parse_analysis_config,
)


def _expect_config_error(data):
    try:
        parse_analysis_config(data)
    except ConfigError as e:
        return e
    raise AssertionError(f"expected ConfigError for {data}")


def test_defaults():
    config = AnalysisConfig()
    assert config.as_dict() == dict(DEFAULT_PARAMETERS)
    assert config.target_acos_index == 1.0
    assert config.phrase_negative_lv == 5.0
    assert config.increase_bid_lv == 0.7
    assert config.decrease_bid_lv == 1.4


def test_defaults_are_read_only():
    try:
        DEFAULT_PARAMETERS["reliability"] = 2.0
    except TypeError:
        pass
    else:
        raise AssertionError("DEFAULT_PARAMETERS should not be writable")

    config = AnalysisConfig()
    try:
        config.reliability = 2.0
    except ValidationError:
        pass
    else:
        raise AssertionError("AnalysisConfig should be frozen")


def test_partial_mapping_uses_defaults():
    config = parse_analysis_config({"target_acos_index": 1.5})
    assert config.target_acos_index == 1.5
    assert config.reliability == DEFAULT_PARAMETERS["reliability"]


def test_non_positive_rejected():
    e = _expect_config_error({"exact_negative_lv": 0})
    assert any(err.startswith("exact_negative_lv") for err in e.errors), e.errors

    e = _expect_config_error({"reliability": -1})
    assert any(err.startswith("reliability") for err in e.errors), e.errors


def test_non_finite_rejected():
    e = _expect_config_error({"target_acos_index": float("nan")})
    assert any("finite" in err for err in e.errors), e.errors

    _expect_config_error({"phrase_negative_lv": float("inf")})


def test_non_numeric_rejected():
    _expect_config_error({"increase_bid_lv": "fast"})


def test_band_must_be_ordered():
    e = _expect_config_error({"increase_bid_lv": 1.5, "decrease_bid_lv": 1.2})
    assert any("decrease_bid_lv" in err for err in e.errors), e.errors
    _expect_config_error({"increase_bid_lv": 1.0, "decrease_bid_lv": 1.0})


def test_unknown_key_rejected():
    e = _expect_config_error({"target_acos": 30})
    assert any(err.startswith("target_acos") for err in e.errors), e.errors


def test_every_problem_listed():
    e = _expect_config_error({"exact_negative_lv": 0, "reliability": -2})
    assert len(e.errors) == 2, e.errors
    assert isinstance(e, ValueError)


def test_outside_recommended_range_only_warns():
    config = parse_analysis_config({"target_acos_index": 3.0, "reliability": 20})
    assert config.target_acos_index == 3.0
    assert config.reliability == 20


def test_load_yaml_analysis_section():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "analysis.yaml"
        path.write_text(
            "analysis:\n"
            "  target_acos_index: 0.8\n"
            "  phrase_negative_lv: 10\n",
            encoding="utf-8",
        )
        config = load_analysis_config(path)

    assert config.target_acos_index == 0.8
    assert config.phrase_negative_lv == 10.0
    assert config.increase_bid_lv == 0.7


def test_load_yaml_top_level_keys():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "analysis.yaml"
        path.write_text("decrease_bid_lv: 1.6\n", encoding="utf-8")
        config = load_analysis_config(str(path))

    assert config.decrease_bid_lv == 1.6


def test_load_empty_yaml_gives_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "analysis.yaml"
        path.write_text("", encoding="utf-8")
        assert load_analysis_config(path) == AnalysisConfig()


def test_load_invalid_yaml_values():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "analysis.yaml"
        path.write_text("analysis:\n  exact_negative_lv: -1\n", encoding="utf-8")
        try:
            load_analysis_config(path)
        except ConfigError as e:
            assert e.errors
        else:
            raise AssertionError("negative parameter should be rejected")


def test_load_non_mapping():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "analysis.yaml"
        path.write_text("- 1.0\n- 2.0\n", encoding="utf-8")
        try:
            load_analysis_config(path)
        except ValueError:
            return
    raise AssertionError("list YAML should be rejected")


def test_load_missing_file():
    try:
        load_analysis_config("/nonexistent/analysis.yaml")
    except FileNotFoundError:
        return
    raise AssertionError("missing config should raise FileNotFoundError")


def test_shipped_config_matches_defaults():
    path = Path(__file__).parent.parent.parent / "configs" / "analysis.yaml"
    assert load_analysis_config(path) == AnalysisConfig()


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
