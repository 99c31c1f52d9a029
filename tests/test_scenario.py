"""Tests for scenario loading and engine construction."""

import pytest
import yaml

from kinesim.config import CatchUpPolicy
from kinesim.errors import ScenarioError
from kinesim.palette import resolve_color
from kinesim.scenario import (
    BodySpec,
    build_body,
    build_engine,
    default_scenario_path,
    list_scenarios,
    load_scenario,
    parse_scenario,
)


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestPackagedScenarios:
    """Tests for the scenarios shipped with the package."""

    def test_packaged_scenarios_listed(self):
        names = list_scenarios()
        assert 'demo' in names
        assert 'step_sizes' in names

    def test_demo_scenario(self):
        scenario = load_scenario(default_scenario_path())

        assert scenario.name == 'demo'
        assert len(scenario.bodies) == 9
        assert scenario.run.duration is None
        assert scenario.run.tick == 0.001
        intervals = [b.interval for b in scenario.bodies
                     if b.behavior == 'accelerated_throw']
        assert intervals == [1, 0.1, 0.01, 0.001, 0.0001]

    def test_demo_engine_paints_every_body(self, recording_surface):
        scenario = load_scenario(default_scenario_path())

        engine = build_engine(scenario, recording_surface)

        assert [b.name for b in engine.bodies] == [s.name for s in scenario.bodies]
        assert len(recording_surface.fills()) == 9

    def test_step_sizes_uses_single_policy(self, recording_surface):
        scenario = load_scenario(default_scenario_path().with_name('step_sizes.yaml'))

        engine = build_engine(scenario, recording_surface)

        assert scenario.engine.default_catch_up is CatchUpPolicy.SINGLE
        assert all(b.policy is CatchUpPolicy.SINGLE for b in engine.bodies)
        assert scenario.run.duration == 10


class TestLoading:
    """Tests for load_scenario() and parse_scenario() error handling."""

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = write_yaml(tmp_path / 'falling.yaml', {
            'bodies': [{'behavior': 'free_fall', 'x': 1, 'y': 2}],
        })

        scenario = load_scenario(path)

        assert scenario.name == 'falling'
        assert scenario.bodies[0].interval == 0.01
        assert scenario.bodies[0].color == 'blue'

    def test_empty_file_is_empty_scenario(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('')

        scenario = load_scenario(path)

        assert scenario.bodies == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScenarioError, match='not found'):
            load_scenario(tmp_path / 'nope.yaml')

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text('bodies: [unclosed\n')

        with pytest.raises(ScenarioError, match='Cannot parse'):
            load_scenario(path)

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ScenarioError, match='must be a mapping'):
            parse_scenario(['free_fall'])

    def test_unknown_behavior_rejected(self):
        with pytest.raises(ScenarioError, match='unknown behavior'):
            parse_scenario({'bodies': [{'behavior': 'warp', 'x': 0, 'y': 0}]})

    def test_unknown_field_rejected(self):
        with pytest.raises(ScenarioError):
            parse_scenario({'bodies': [
                {'behavior': 'free_fall', 'x': 0, 'y': 0, 'mass': 3},
            ]})

    def test_negative_interval_rejected(self):
        with pytest.raises(ScenarioError):
            parse_scenario({'bodies': [
                {'behavior': 'free_fall', 'x': 0, 'y': 0, 'interval': -1},
            ]})

    def test_engine_settings_validated(self):
        with pytest.raises(ScenarioError):
            parse_scenario({'engine': {'pixels_per_meter': 0}})

    def test_null_tick_means_measured(self):
        scenario = parse_scenario({'run': {'duration': 3, 'tick': None}})
        assert scenario.run.tick is None
        assert scenario.run.duration == 3


class TestBuildBody:
    """Tests for build_body()."""

    def test_body_and_sprite_from_body_spec(self):
        spec = BodySpec(behavior='free_fall', x=5, y=6, interval=0.02,
                        params={'a': -1.625}, name='moon', side_length=2,
                        color=(10, 20, 30), trail=False)

        body = build_body(spec)

        assert body.name == 'moon'
        assert body.position == (5.0, 6.0)
        assert body.interval_ms == pytest.approx(20.0)
        assert body.policy is CatchUpPolicy.FIXED_STEP
        assert body.has_behavior
        assert body.sprite.side_length == 2.0
        assert body.sprite.color == resolve_color((10, 20, 30))
        assert body.sprite.trail is False

    def test_spec_policy_overrides_default(self):
        spec = BodySpec(behavior='free_fall', x=0, y=0, policy='fixed_step')

        body = build_body(spec, default_policy=CatchUpPolicy.SINGLE)

        assert body.policy is CatchUpPolicy.FIXED_STEP

    def test_bad_params_raise_scenario_error(self):
        spec = BodySpec(behavior='free_fall', x=0, y=0, params={'speed': 3})

        with pytest.raises(ScenarioError, match='free_fall'):
            build_body(spec)

    def test_engine_uses_scenario_settings(self, recording_surface, clock):
        scenario = parse_scenario({
            'engine': {'pixels_per_meter': 5},
            'bodies': [{'behavior': 'constant_velocity', 'x': 1, 'y': 1}],
        })

        engine = build_engine(scenario, recording_surface, clock=clock, sleep=clock.sleep)
        stats = engine.run(duration=0.02, tick=0.01)

        assert engine.config.pixels_per_meter == 5
        assert engine.bodies[0].sprite.scale == 5
        assert stats.ticks == 2
