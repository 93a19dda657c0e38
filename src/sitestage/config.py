"""Configuration management for Sitestage.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "sitestage.toml"

DEFAULT_ORIGIN = "http://localhost:8080"
DEFAULT_DESCRIPTION = (
    "Generative Process Intelligence puts operational data and human "
    "knowledge into context for the application of GenAI."
)


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class SiteConfig:
    """Site configuration."""

    origin: str = DEFAULT_ORIGIN
    default_description: str = DEFAULT_DESCRIPTION
    registry_file: Path | None = None
    strings_file: Path | None = None


@dataclass
class SitemapConfig:
    """Sitemap output configuration."""

    output: Path = field(default_factory=lambda: Path("public/sitemap.xml"))


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    sitemap: SitemapConfig
    catalogs: dict[str, Path] = field(default_factory=dict)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for sitestage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            site=SiteConfig(),
            sitemap=SitemapConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site"), config_dir),
            sitemap=cls._parse_sitemap(data.get("sitemap"), config_dir),
            catalogs=cls._parse_catalogs(data.get("catalogs"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        """Parse site configuration section.

        Args:
            data: Raw site section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SiteConfig instance
        """
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        origin = data.get("origin", DEFAULT_ORIGIN)
        if not isinstance(origin, str):
            raise ValueError("site.origin must be a string")
        origin = normalize_origin(origin)

        default_description = data.get("default_description", DEFAULT_DESCRIPTION)
        if not isinstance(default_description, str) or not default_description:
            raise ValueError("site.default_description must be a non-empty string")

        registry = data.get("registry")
        if registry is not None and not isinstance(registry, str):
            raise ValueError("site.registry must be a string")

        strings = data.get("strings")
        if strings is not None and not isinstance(strings, str):
            raise ValueError("site.strings must be a string")

        return SiteConfig(
            origin=origin,
            default_description=default_description,
            registry_file=config_dir / registry if registry is not None else None,
            strings_file=config_dir / strings if strings is not None else None,
        )

    @classmethod
    def _parse_sitemap(cls, data: object, config_dir: Path) -> SitemapConfig:
        if data is None:
            return SitemapConfig(output=config_dir / "public" / "sitemap.xml")

        if not isinstance(data, dict):
            raise ValueError("sitemap section must be a dictionary")

        output = data.get("output", "public/sitemap.xml")
        if not isinstance(output, str):
            raise ValueError("sitemap.output must be a string")

        return SitemapConfig(output=config_dir / output)

    @classmethod
    def _parse_catalogs(cls, data: object, config_dir: Path) -> dict[str, Path]:
        """Parse catalogs section mapping catalog names to JSON files."""
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("catalogs section must be a dictionary")

        catalogs: dict[str, Path] = {}
        for name, source in data.items():
            if not isinstance(source, str):
                raise ValueError(f"catalogs.{name} must be a string")
            catalogs[name] = config_dir / source
        return catalogs

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        origin: str | None = None,
        sitemap_output: Path | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            origin: Override site.origin
            sitemap_output: Override sitemap.output

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        site = self.site
        if origin is not None:
            site = replace(self.site, origin=normalize_origin(origin))

        sitemap = self.sitemap
        if sitemap_output is not None:
            sitemap = replace(self.sitemap, output=sitemap_output)

        return replace(self, server=server, site=site, sitemap=sitemap)


def normalize_origin(origin: str) -> str:
    """Validate an origin and strip its trailing slash.

    Raises:
        ValueError: If origin is not an http(s) URL
    """
    if not origin.startswith(("http://", "https://")):
        raise ValueError(f"site.origin must start with http:// or https://: {origin!r}")
    return origin.rstrip("/")
