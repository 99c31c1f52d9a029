"""
YAML scenario files.

A scenario lists the bodies to simulate, their behaviors, and how to run
the engine:

    name: moon_vs_earth
    engine:
      pixels_per_meter: 10
    run:
      duration: 20      # seconds, omit to run until stopped
      tick: 0.001       # seconds, null for measured ticks
    bodies:
      - behavior: free_fall
        x: 20
        y: 40
        interval: 0.01  # seconds between behavior steps
        color: green
      - behavior: free_fall
        x: 40
        y: 40
        interval: 0.01
        params: {a: -1.625}
        color: grey
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kinesim.behaviors import BehaviorRegistry
from kinesim.body import SimBody
from kinesim.config import CatchUpPolicy, EngineConfig
from kinesim.engine import Engine
from kinesim.errors import ScenarioError, UnknownBehaviorError
from kinesim.logging import get_logger
from kinesim.sprite import SquareSprite
from kinesim.surface import DrawingSurface

log = get_logger('scenario')

SCENARIOS_DIR = Path(__file__).parent / 'scenarios'


class BodySpec(BaseModel):
    """One body in a scenario file."""
    behavior: str
    x: float
    y: float
    interval: float = Field(0.01, ge=0)  # seconds
    params: Dict[str, float] = Field(default_factory=dict)
    name: Optional[str] = None
    policy: Optional[CatchUpPolicy] = None
    side_length: float = Field(1.0, gt=0)
    color: Union[str, Tuple[int, int, int], Tuple[int, int, int, int]] = 'blue'
    trail: bool = True
    paint_on_move: bool = True

    model_config = ConfigDict(extra='forbid')

    @field_validator('behavior')
    @classmethod
    def validate_behavior(cls, v: str) -> str:
        if not BehaviorRegistry.is_registered(v):
            raise ValueError(
                f"unknown behavior '{v}' "
                f"(available: {', '.join(BehaviorRegistry.list_behaviors())})"
            )
        return v


class RunSpec(BaseModel):
    """How long and with which tick to run."""
    duration: Optional[float] = Field(None, gt=0)
    tick: Optional[float] = Field(0.001, gt=0)

    model_config = ConfigDict(extra='forbid')


class Scenario(BaseModel):
    """A complete scenario file."""
    name: str = 'scenario'
    description: str = ''
    engine: EngineConfig = Field(default_factory=EngineConfig)
    run: RunSpec = Field(default_factory=RunSpec)
    bodies: List[BodySpec] = Field(default_factory=list)

    model_config = ConfigDict(extra='forbid')


def parse_scenario(data: Dict[str, Any], source: Optional[Path] = None) -> Scenario:
    """
    Validate raw scenario data.

    Raises:
        ScenarioError: If the data does not describe a valid scenario
    """
    where = f" in {source}" if source else ""
    if not isinstance(data, dict):
        raise ScenarioError(f"Scenario{where} must be a mapping, got {type(data).__name__}")
    try:
        return Scenario.model_validate(data)
    except ValidationError as e:
        raise ScenarioError(f"Invalid scenario{where}:\n{e}") from e


def load_scenario(path: Union[str, Path]) -> Scenario:
    """
    Load and validate a scenario YAML file.

    Raises:
        ScenarioError: If the file is missing, unreadable, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ScenarioError(f"Cannot parse {path}: {e}") from e

    scenario = parse_scenario(data, source=path)
    if scenario.name == 'scenario':
        scenario = scenario.model_copy(update={'name': path.stem})
    log.debug("Loaded scenario %s (%d bodies)", scenario.name, len(scenario.bodies))
    return scenario


def default_scenario_path() -> Path:
    return SCENARIOS_DIR / 'demo.yaml'


def list_scenarios() -> List[str]:
    """Names of the scenarios shipped with the package."""
    return sorted(p.stem for p in SCENARIOS_DIR.glob('*.yaml'))


def build_body(spec: BodySpec, default_policy: CatchUpPolicy = CatchUpPolicy.FIXED_STEP) -> SimBody:
    """
    Create a body with its sprite and behavior from a BodySpec.

    Raises:
        ScenarioError: If the behavior rejects the given params
    """
    body = SimBody(
        x=spec.x,
        y=spec.y,
        interval_ms=spec.interval * 1000.0,
        name=spec.name,
        policy=spec.policy or default_policy,
    )
    body.attach(SquareSprite(
        side_length=spec.side_length,
        color=spec.color,
        trail=spec.trail,
        paint_on_move=spec.paint_on_move,
    ))
    try:
        BehaviorRegistry.create(spec.behavior, body, **spec.params)
    except (TypeError, UnknownBehaviorError) as e:
        raise ScenarioError(f"Cannot build body {body.name} ({spec.behavior}): {e}") from e
    return body


def build_engine(scenario: Scenario, surface: DrawingSurface, **engine_kwargs: Any) -> Engine:
    """Create an engine with every body of the scenario registered in order."""
    bodies = [build_body(spec, scenario.engine.default_catch_up) for spec in scenario.bodies]
    return Engine(surface, bodies, config=scenario.engine, **engine_kwargs)
