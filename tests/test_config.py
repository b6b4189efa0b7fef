"""Tests for the configuration model and change detection."""
import copy

import pytest
from flexconf.config import (
    FlexConfig,
    IOSettings,
    configs_equal,
    deep_equal,
    diff_configs,
    normalize_config,
)


@pytest.fixture
def full_config():
    """A configuration with every field set."""
    return FlexConfig(
        backend="Windows WASAPI",
        buffer_size_samples=480,
        input=IOSettings(
            device="Microphone (Realtek(R) Audio)",
            suggested_latency_seconds=0.01,
            wasapi_exclusive_mode=True,
            wasapi_auto_convert=False,
            channels=2,
        ),
        output=IOSettings(
            device="Speakers (Realtek(R) Audio)",
            suggested_latency_seconds=0.02,
            wasapi_exclusive_mode=False,
            wasapi_auto_convert=True,
            channels=2,
        ),
    )


class TestFlexConfig:
    """Dict round-trip with the driver's keys."""

    def test_to_dict_keys(self, full_config):
        data = full_config.to_dict()
        assert data["backend"] == "Windows WASAPI"
        assert data["bufferSizeSamples"] == 480
        assert data["input"]["suggestedLatencySeconds"] == 0.01
        assert data["input"]["wasapiExclusiveMode"] is True
        assert data["output"]["wasapiAutoConvert"] is True
        assert set(data["output"]) == {
            "device", "suggestedLatencySeconds", "wasapiExclusiveMode",
            "wasapiAutoConvert", "channels",
        }

    def test_from_dict(self, full_config):
        assert FlexConfig.from_dict(full_config.to_dict()) == full_config

    def test_from_dict_partial(self):
        """Unknown keys are ignored and missing sections stay None."""
        config = FlexConfig.from_dict({
            "backend": "MME",
            "input": {"device": "Mic", "bogus": 1},
            "somethingElse": True,
        })
        assert config.backend == "MME"
        assert config.buffer_size_samples is None
        assert config.input == IOSettings(device="Mic")
        assert config.output is None
        assert config.to_dict()["output"] is None

    def test_default(self):
        config = FlexConfig.default()
        assert config.backend == "Windows WASAPI"
        assert config.input.device == ""
        assert config.output.device == ""


class TestNormalizeConfig:
    """Latency rounding as done on save."""

    def test_rounds_latency(self, full_config):
        full_config.input.suggested_latency_seconds = 0.26
        full_config.output.suggested_latency_seconds = 0.0123
        normalized = normalize_config(full_config)
        assert normalized.input.suggested_latency_seconds == 0.3
        assert normalized.output.suggested_latency_seconds == 0.0

    def test_does_not_mutate(self, full_config):
        normalize_config(full_config)
        assert full_config.input.suggested_latency_seconds == 0.01

    def test_missing_sections(self):
        config = FlexConfig(backend="MME", input=None, output=IOSettings())
        normalized = normalize_config(config)
        assert normalized.input is None
        assert normalized.output.suggested_latency_seconds is None


class TestConfigsEqual:
    """Tests for configs_equal."""

    def test_no_original_is_changed(self, full_config):
        assert configs_equal(full_config, None) is False
        assert configs_equal({}, None) is False

    def test_no_current_is_changed(self, full_config):
        assert configs_equal(None, full_config) is False

    def test_same_config(self, full_config):
        assert configs_equal(full_config, full_config) is True
        assert configs_equal(full_config, copy.deepcopy(full_config)) is True

    def test_dict_and_dataclass(self, full_config):
        assert configs_equal(full_config.to_dict(), full_config) is True

    @pytest.mark.parametrize("section,attr,value", [
        ("input", "channels", 1),
        ("input", "device", "Line In (USB)"),
        ("output", "suggested_latency_seconds", 0.05),
        ("output", "wasapi_exclusive_mode", True),
        ("input", "wasapi_auto_convert", None),
    ])
    def test_single_leaf_change(self, full_config, section, attr, value):
        """Flipping any leaf makes the configs differ."""
        edited = copy.deepcopy(full_config)
        setattr(getattr(edited, section), attr, value)
        assert configs_equal(edited, full_config) is False

    def test_backend_change(self, full_config):
        edited = copy.deepcopy(full_config)
        edited.backend = "MME"
        assert configs_equal(edited, full_config) is False

    def test_buffer_size_both_absent(self, full_config):
        a = copy.deepcopy(full_config)
        b = copy.deepcopy(full_config)
        a.buffer_size_samples = None
        b.buffer_size_samples = None
        assert configs_equal(a, b) is True
        b.buffer_size_samples = 256
        assert configs_equal(a, b) is False

    def test_partial_current_missing_section(self, full_config):
        """A partial config without a section differs from one that has it."""
        current = full_config.to_dict()
        del current["output"]
        assert configs_equal(current, full_config) is False

    def test_section_key_sets_must_match(self, full_config):
        current = full_config.to_dict()
        del current["input"]["channels"]
        assert configs_equal(current, full_config) is False

    def test_both_sections_absent(self):
        a = FlexConfig(backend="MME", input=None, output=None)
        b = FlexConfig(backend="MME", input=None, output=None)
        assert configs_equal(a, b) is True

    def test_flag_is_not_a_number(self, full_config):
        current = full_config.to_dict()
        current["input"]["wasapiExclusiveMode"] = 1
        assert configs_equal(current, full_config) is False


class TestDeepEqual:
    """Structural equality helper."""

    def test_nested(self):
        assert deep_equal({"a": {"b": 1}}, {"a": {"b": 1}}) is True
        assert deep_equal({"a": {"b": 1}}, {"a": {"b": 2}}) is False
        assert deep_equal({"a": {"b": 1}}, {"a": 1}) is False

    def test_scalars(self):
        assert deep_equal(None, None) is True
        assert deep_equal(1, 1.0) is True
        assert deep_equal(True, 1) is False
        assert deep_equal("x", None) is False


class TestDiffConfigs:
    """Tests for diff_configs and ConfigDiff."""

    def test_no_changes(self, full_config):
        diff = diff_configs(full_config, copy.deepcopy(full_config))
        assert not diff.has_changes()
        assert diff.to_text() == "No changes detected"

    def test_reports_leaf_paths(self, full_config):
        edited = copy.deepcopy(full_config)
        edited.input.channels = 1
        edited.backend = "MME"
        diff = diff_configs(edited, full_config)
        assert diff.has_changes()
        assert diff.paths == ["backend", "input.channels"]
        text = diff.to_text()
        assert "~ input.channels: 2 -> 1" in text
        assert "~ backend: 'Windows WASAPI' -> 'MME'" in text

    def test_missing_key(self, full_config):
        current = full_config.to_dict()
        del current["output"]["channels"]
        diff = diff_configs(current, full_config)
        assert diff.paths == ["output.channels"]
        assert "- output.channels: 2" in diff.to_text()

    def test_added_key(self, full_config):
        current = full_config.to_dict()
        current["input"]["extra"] = 5
        diff = diff_configs(current, full_config)
        assert diff.paths == ["input.extra"]
        assert "+ input.extra: 5" in diff.to_text()

    def test_missing_original(self, full_config):
        diff = diff_configs(full_config, None)
        assert "backend" in diff.paths
        assert "input" in diff.paths
