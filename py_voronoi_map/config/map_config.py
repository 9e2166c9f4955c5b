"""
Generation parameters for a single map run.

Everything a run needs is described by one frozen ``MapConfig``. It is
validated as a whole before any sampling starts; invalid input raises
``ConfigurationError``.
"""

from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .config import settings


class ConfigurationError(ValueError):
    """Raised when generation parameters are invalid."""


class SeedMode(str, Enum):
    """How the seed points of a run are produced."""

    UNIFORM = "uniform"
    POISSON_DISC = "poisson_disc"
    LLOYD = "lloyd"


class NoiseOptions(BaseModel):
    """Parameters of one noise field."""

    model_config = ConfigDict(frozen=True)

    octaves: int = Field(default=4, ge=1, le=12, description="Number of octaves to sum")
    amplitude: float = Field(default=0.1, gt=0, description="Starting octave amplitude")
    persistence: float = Field(
        default=0.5, gt=0, le=1, description="Amplitude multiplier per octave"
    )
    step: float = Field(default=4.0, gt=0, description="Map units per lattice cell")


class NoiseConfig(BaseModel):
    """The four independent noise fields of a run."""

    model_config = ConfigDict(frozen=True)

    elevation: NoiseOptions = Field(
        default_factory=lambda: NoiseOptions(octaves=6, persistence=0.5, step=4.0)
    )
    coast: NoiseOptions = Field(
        default_factory=lambda: NoiseOptions(octaves=5, persistence=0.6, step=16.0)
    )
    detail: NoiseOptions = Field(
        default_factory=lambda: NoiseOptions(octaves=3, persistence=0.5, step=2.0)
    )
    warp: NoiseOptions = Field(
        default_factory=lambda: NoiseOptions(octaves=4, persistence=0.5, step=40.0)
    )


class IslandOptions(BaseModel):
    """Island outline parameters."""

    model_config = ConfigDict(frozen=True)

    base_radius: float = Field(
        default=0.55, gt=0, le=1.5, description="Mean island radius, normalised to the corner distance"
    )
    harmonic_count: int = Field(default=3, ge=0, le=16, description="Sinusoidal outline terms")
    harmonic_amplitude: float = Field(
        default=0.06, ge=0, description="Maximum amplitude of one outline term"
    )
    min_frequency: int = Field(default=2, ge=1, description="Lowest outline term frequency")
    max_frequency: int = Field(default=7, ge=1, description="Highest outline term frequency")
    use_warp: bool = Field(default=True, description="Add the low-frequency warp term")
    warp_amplitude: float = Field(default=0.08, ge=0, description="Amplitude of the warp term")
    angular_warp_strength: float = Field(
        default=0.35, ge=0, description="Radians the warp noise field can bend the outline angle"
    )
    edge_band: float = Field(
        default=0.15, gt=0, lt=1, description="Fraction of the radius blended toward the coast"
    )

    @model_validator(mode="after")
    def check_frequencies(self) -> "IslandOptions":
        if self.min_frequency > self.max_frequency:
            raise ValueError("min_frequency must not exceed max_frequency")
        return self


class ElevationOptions(BaseModel):
    """How the noise fields are blended into one elevation per cell."""

    model_config = ConfigDict(frozen=True)

    coast_weight: float = Field(default=0.35, ge=0, le=1, description="Share of the coast field")
    detail_weight: float = Field(default=0.1, ge=0, le=1, description="Detail jitter strength")
    contrast: float = Field(default=1.8, gt=0, description="Stretch around 0.5 before clipping")


class TerrainThresholds(BaseModel):
    """Upper elevation bounds of each terrain band."""

    model_config = ConfigDict(frozen=True)

    ocean: float = Field(default=0.3, description="Elevations below this are ocean")
    plains: float = Field(default=0.5, description="Elevations below this are plains")
    forest: float = Field(default=0.7, description="Elevations below this are forest")

    @model_validator(mode="after")
    def check_order(self) -> "TerrainThresholds":
        if not (0 < self.ocean < self.plains < self.forest <= 1):
            raise ValueError(
                "Thresholds must satisfy 0 < ocean < plains < forest <= 1, "
                f"got {self.ocean}, {self.plains}, {self.forest}"
            )
        return self


class SettlementOptions(BaseModel):
    """Settlement placement options."""

    model_config = ConfigDict(frozen=True)

    min_count: int = Field(default=4, ge=0, description="Fewest settlements to attempt")
    max_count: int = Field(default=8, ge=0, description="Most settlements to attempt")
    suffix_chance: float = Field(
        default=0.5, ge=0, le=1, description="Probability a name gets a suffix word"
    )

    @model_validator(mode="after")
    def check_range(self) -> "SettlementOptions":
        if self.min_count > self.max_count:
            raise ValueError("min_count must not exceed max_count")
        return self


class MapConfig(BaseModel):
    """Complete configuration of one generation run."""

    model_config = ConfigDict(frozen=True)

    seed_count: int = Field(default=settings.default_seed_count, gt=0, description="Seed points")
    width: float = Field(default=settings.default_width, gt=0, allow_inf_nan=False,
                         description="Map width")
    height: float = Field(default=settings.default_height, gt=0, allow_inf_nan=False,
                          description="Map height")
    seed_mode: SeedMode = Field(default=SeedMode.LLOYD, description="Seed sampling strategy")
    poisson_radius: float = Field(default=20.0, gt=0, allow_inf_nan=False,
                                  description="Poisson-disc minimum spacing")
    lloyd_iterations: int = Field(default=2, ge=0, description="Lloyd relaxation rounds")
    seed: Optional[Union[str, int]] = Field(default=None, description="Random seed")

    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    island: IslandOptions = Field(default_factory=IslandOptions)
    elevation: ElevationOptions = Field(default_factory=ElevationOptions)
    thresholds: TerrainThresholds = Field(default_factory=TerrainThresholds)
    settlements: SettlementOptions = Field(default_factory=SettlementOptions)

    @field_validator("seed_count")
    @classmethod
    def check_seed_limit(cls, value: int) -> int:
        if value > settings.max_seed_count:
            raise ValueError(f"seed_count {value} exceeds the limit of {settings.max_seed_count}")
        return value

    @field_validator("width")
    @classmethod
    def check_width_limit(cls, value: float) -> float:
        if value > settings.max_map_width:
            raise ValueError(f"width {value} exceeds the limit of {settings.max_map_width}")
        return value

    @field_validator("height")
    @classmethod
    def check_height_limit(cls, value: float) -> float:
        if value > settings.max_map_height:
            raise ValueError(f"height {value} exceeds the limit of {settings.max_map_height}")
        return value


def load_map_config(config: Union[MapConfig, Mapping[str, Any], None] = None,
                    **overrides: Any) -> MapConfig:
    """
    Build a validated MapConfig.

    Args:
        config: Existing config, a mapping of parameters, or None for defaults
        **overrides: Individual parameters replacing those in ``config``

    Returns:
        Validated, frozen configuration

    Raises:
        ConfigurationError: Any parameter is invalid
    """
    if isinstance(config, MapConfig):
        if not overrides:
            return config
        params = config.model_dump()
    else:
        params = dict(config or {})
    params.update(overrides)

    try:
        return MapConfig.model_validate(params)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid map configuration: {problems}") from exc
