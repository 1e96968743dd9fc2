"""Configuration loading and validation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class DatasetConfig(BaseModel):
    """Where the budget dataset comes from."""

    source: str = Field(default="data/jmu.json", description="Local path or http(s) URL")
    timeout_seconds: float = Field(default=30.0, gt=0)
    revenue_year: str = Field(default="2023", pattern=r"^\d{4}$")

    @field_validator("revenue_year", mode="before")
    @classmethod
    def coerce_year(cls, v: Any) -> Any:
        """Accept an unquoted YAML year such as 2023."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class LayoutConfig(BaseModel):
    """Options handed to the d3-sankey layout and renderer."""

    width: int = Field(default=928, ge=100)
    height: int = Field(default=600, ge=100)
    node_width: int = Field(default=15, ge=1)
    node_padding: int = Field(default=10, ge=0)
    node_align: str = Field(default="justify", pattern=r"^(justify|left|right|center)$")
    link_color: str = Field(
        default="source-target",
        description="source-target, source, target, or a static CSS colour",
    )
    value_format: str = Field(default=",.0f", description="d3-format specifier for tooltips")

    @field_validator("link_color")
    @classmethod
    def validate_link_color(cls, v: str) -> str:
        """Reject empty colour strings."""
        if not v.strip():
            msg = "link_color must not be empty"
            raise ValueError(msg)
        return v.strip()


class ReportConfig(BaseModel):
    """Report configuration section."""

    title: str = "JMU Budget Flows"
    output_dir: Path = Field(default=Path("./site"))


class Config(BaseModel):
    """Root configuration model."""

    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def load_config(path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] | None = yaml.safe_load(f)

    return Config.model_validate(raw_config or {})
