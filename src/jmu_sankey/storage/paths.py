"""Path management for the generated site."""

from pathlib import Path

from jmu_sankey.config import Config
from jmu_sankey.graph.model import DiagramKind


class SitePaths:
    """Manages paths for the generated site.

    Layout:
    - site/index.html
    - site/data/<kind>.json
    - site/assets/
    """

    def __init__(self, config: Config) -> None:
        """Initialize path manager with configuration.

        Args:
            config: Application configuration.
        """
        self.config = config

    @property
    def site_root(self) -> Path:
        """Root path for generated site."""
        return Path(self.config.report.output_dir)

    @property
    def data_path(self) -> Path:
        """Directory holding one JSON graph per diagram."""
        return self.site_root / "data"

    @property
    def assets_path(self) -> Path:
        """Directory holding copied static assets."""
        return self.site_root / "assets"

    @property
    def index_path(self) -> Path:
        return self.site_root / "index.html"

    def diagram_data_path(self, kind: DiagramKind) -> Path:
        """Path to the JSON graph for a diagram kind."""
        return self.data_path / f"{kind.value}.json"

    def ensure_directories(self) -> None:
        """Create the site directories if they don't exist."""
        for path in (self.site_root, self.data_path, self.assets_path):
            path.mkdir(parents=True, exist_ok=True)
