"""Tests for parameter merging, profiles and validation."""
import json

import pytest

from flatboard.config import (
    BASE_PARAMETERS,
    DEFAULT_PROFILE,
    CaseStyle,
    KeyboardConfig,
    LayoutMode,
    available_profiles,
    deep_merge,
    load_overrides,
    load_profile,
    merge_layers,
    resolve_config,
    resolve_parameters,
    switch_layer,
)
from flatboard.errors import ConfigurationError
from flatboard.model import EdgeMargin, Point2D, RowLayoutItem


class TestMerge:

    def test_nested_merge(self):
        merged = deep_merge({"a": {"b": 1, "c": 2}, "d": [1, 2]}, {"a": {"b": 3}, "d": [4]})
        assert merged == {"a": {"b": 3, "c": 2}, "d": [4]}

    def test_none_keeps_base(self):
        assert deep_merge({"a": 1}, {"a": None}) == {"a": 1}

    def test_inputs_untouched(self):
        base = {"a": {"b": [1]}}
        merged = deep_merge(base, {"c": 1})
        merged["a"]["b"].append(2)
        assert base == {"a": {"b": [1]}}

    def test_merge_layers_in_order(self):
        assert merge_layers({"a": 1}, None, {"a": 2}, {"b": 3}) == {"a": 2, "b": 3}


class TestResolve:

    def test_switch_spec_fills_pitch(self):
        params = resolve_parameters({"switch": {"type": "mx"}})
        assert params["layout"]["matrix"]["pitch"] == 18.6
        assert params["switch"]["cutout"]["footprint"] == 15.9

    def test_profile_wins_over_switch_spec(self):
        params = resolve_parameters({"layout": {"matrix": {"pitch": 19.05}}})
        assert params["layout"]["matrix"]["pitch"] == 19.05

    def test_overrides_win_over_profile(self):
        params = resolve_parameters({"layout": {"edge_margin": 3.0}}, {"layout": {"edge_margin": 7.0}})
        assert params["layout"]["edge_margin"] == 7.0

    def test_base_parameters_untouched(self):
        resolve_parameters({"layout": {"center_gap": 1.0}})
        assert BASE_PARAMETERS["layout"]["center_gap"] == 25.0

    def test_unknown_switch(self):
        with pytest.raises(ConfigurationError):
            switch_layer("alps")


class TestProfiles:

    def test_profiles_listed(self):
        profiles = available_profiles()
        assert DEFAULT_PROFILE in profiles
        assert {"corne", "planck", "test-single-choc", "test-single-mx"} <= set(profiles)

    @pytest.mark.parametrize("name", ["corne", "macropad-3x3", "planck", "split-36", "sweep", "test-single-choc", "test-single-mx"])
    def test_every_profile_resolves(self, name):
        config = resolve_config(name)
        assert config.name == name
        assert config.layout.matrix.row_layout

    def test_unknown_profile(self):
        with pytest.raises(ConfigurationError, match="not found"):
            load_profile("does-not-exist")

    def test_split_36(self):
        config = resolve_config("split-36")
        assert config.layout.mode is LayoutMode.SPLIT
        assert config.layout.base_degrees == 13.0
        assert config.layout.edge_margin == EdgeMargin.uniform(8.0)
        assert config.layout.matrix.pitch == 18.0
        assert config.layout.matrix.row_layout[0] == RowLayoutItem(0, 3, 5.0, 2)
        assert config.thumb.count == 3
        assert config.thumb.base_offset == Point2D(25, 2)
        assert config.thumb.rotations == (-10.0, 0.0, 10.0)

    def test_mx_profile(self):
        config = resolve_config("test-single-mx")
        assert config.switch.type == "mx"
        assert config.switch.footprint == 15.9
        assert config.layout.matrix.pitch == 18.6
        assert config.thumb is None

    def test_organic_profile(self):
        config = resolve_config("corne")
        assert config.enclosure.case_style is CaseStyle.ORGANIC
        assert config.enclosure.organic.section_size == 15.0
        assert config.enclosure.organic.section_offset == 5.0

    def test_overrides_file(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"layout": {"edge_margin": 2.5}}))
        config = resolve_config("test-single-choc", load_overrides(path))
        assert config.layout.edge_margin == EdgeMargin.uniform(2.5)

    def test_bad_overrides_file(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_overrides(path)

    def test_overrides_must_be_object(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            load_overrides(path)

    def test_missing_overrides_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_overrides(tmp_path / "missing.json")


class TestValidation:

    def test_defaults(self, make_config):
        config = make_config()
        assert config.layout.mode is LayoutMode.SINGLE
        assert config.enclosure.case_style is CaseStyle.RECTANGULAR
        assert config.enclosure.total_height == pytest.approx(9.5)
        assert config.enclosure.organic.section_size is None
        assert config.resolution == 64
        assert config.thumb is None

    def test_edge_margin_sides(self, make_config):
        config = make_config({"layout": {"edge_margin": {"left": 1, "right": 2, "top": 3, "bottom": 4}}})
        assert config.layout.edge_margin == EdgeMargin(1, 2, 3, 4)
        assert config.layout.edge_margin.smallest() == 1

    def test_config_is_frozen(self, make_config):
        config = make_config()
        with pytest.raises(AttributeError):
            config.resolution = 8

    @pytest.mark.parametrize("overrides", [
        {"layout": {"mode": "triple"}},
        {"layout": {"matrix": {"row_layout": []}}},
        {"layout": {"matrix": {"row_layout": [{"start": 0, "length": 0}]}}},
        {"layout": {"matrix": {"row_layout": [{"start": 0.5, "length": 2}]}}},
        {"layout": {"matrix": {"pitch": "wide"}}},
        {"layout": {"edge_margin": "6"}},
        {"layout": {"edge_margin": {"left": 1}}},
        {"switch": {"type": "alps"}},
        {"enclosure": {"case_style": "round"}},
        {"thumb": {"cluster": {"keys": -1}}},
        {"thumb": {"cluster": {"keys": 2}, "per_key": {"rotations": ["a"]}}},
    ])
    def test_invalid(self, make_config, overrides):
        with pytest.raises(ConfigurationError):
            make_config(overrides)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            KeyboardConfig.from_dict({"layout": {"matrix": {"row_layout": []}}})

    def test_thumb_per_key_may_be_short(self, make_config):
        config = make_config({"thumb": {"cluster": {"keys": 3}, "per_key": {"rotations": [5]}}})
        assert config.thumb.key_rotation(0) == 5.0
        assert config.thumb.key_rotation(2) == 0.0
        assert config.thumb.key_offset(1) == Point2D(0, 0)
