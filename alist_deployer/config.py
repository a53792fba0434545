from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

DEFAULT_CONFIG_NAME = "deploy.yaml"


@dataclass(frozen=True)
class ProxySite:
    """One reverse-proxy routing rule: public hostname -> service:port."""

    hostname: str
    service: str
    port: int

    @property
    def upstream(self) -> str:
        return f"{self.service}:{self.port}"

    @property
    def url(self) -> str:
        return f"https://{self.hostname}"


DEFAULT_SITES: Tuple[ProxySite, ...] = (ProxySite(hostname="alist.pm6422.site", service="alist", port=5244),)


@dataclass(frozen=True)
class DeployConfig:
    project_dir: Path = field(default_factory=Path.cwd)
    manifest: str = "docker-compose.yml"
    sites: Tuple[ProxySite, ...] = DEFAULT_SITES

    app_config_dir: str = "config/alist"
    proxy_config_dir: str = "config/caddy"
    proxy_subdirs: Tuple[str, ...] = ("data", "config")
    caddyfile: str = "config/caddy/Caddyfile"
    dir_mode: int = 0o755

    min_memory_gb: int = 1
    min_disk_gb: int = 5
    recommended_memory_gb: int = 2
    recommended_disk_gb: int = 10
    disk_path: str = "/"

    docker_install_url: str = "https://get.docker.com"

    wait_seconds: float = 30.0
    health_timeout_seconds: float = 180.0
    poll_interval_seconds: float = 5.0
    log_tail: int = 20

    def resolve(self, rel: str) -> Path:
        p = Path(rel)
        return p if p.is_absolute() else self.project_dir / p

    @property
    def manifest_path(self) -> Path:
        return self.resolve(self.manifest)

    @property
    def caddyfile_path(self) -> Path:
        return self.resolve(self.caddyfile)

    @property
    def layout_dirs(self) -> list[Path]:
        proxy = self.resolve(self.proxy_config_dir)
        return [self.resolve(self.app_config_dir), *[proxy / sub for sub in self.proxy_subdirs]]


def _parse_mode(value: Any) -> int:
    # YAML turns 755 into decimal 755 and 0755 into 493, so only quoted octal is unambiguous.
    if not isinstance(value, str):
        raise ValueError(f"dir_mode must be a quoted octal string such as '0755', got {value!r}")
    try:
        mode = int(value, 8)
    except ValueError as e:
        raise ValueError(f"dir_mode is not an octal mode: {value!r}") from e
    if not 0 <= mode <= 0o7777:
        raise ValueError(f"dir_mode out of range: {value!r}")
    return mode


def _parse_sites(raw: Any) -> Tuple[ProxySite, ...]:
    if not isinstance(raw, list) or not raw:
        raise ValueError("sites must be a non-empty list")
    sites = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError(f"site entry must be a mapping, got {item!r}")
        hostname = str(item.get("hostname") or "").strip()
        upstream = str(item.get("upstream") or "").strip()
        service, sep, port = upstream.rpartition(":")
        if not hostname or not sep or not service or not port.isdigit():
            raise ValueError(f"site entry needs hostname and upstream 'service:port', got {item!r}")
        sites.append(ProxySite(hostname=hostname, service=service, port=int(port)))
    return tuple(sites)


def config_from_mapping(raw: Dict[str, Any], *, base_dir: Path) -> DeployConfig:
    """Build a DeployConfig from a parsed YAML mapping (missing keys keep defaults)."""

    layout = raw.get("layout") or {}
    requirements = raw.get("requirements") or {}
    docker = raw.get("docker") or {}
    launch = raw.get("launch") or {}
    for name, section in (("layout", layout), ("requirements", requirements), ("docker", docker), ("launch", launch)):
        if not isinstance(section, dict):
            raise ValueError(f"{name} must be a mapping")

    project_dir = Path(str(raw.get("project_dir") or "."))
    if not project_dir.is_absolute():
        project_dir = base_dir / project_dir

    cfg = DeployConfig(project_dir=project_dir)
    overrides: Dict[str, Any] = {}

    if "manifest" in raw:
        overrides["manifest"] = str(raw["manifest"])
    if "sites" in raw:
        overrides["sites"] = _parse_sites(raw["sites"])

    for key in ("app_config_dir", "proxy_config_dir", "caddyfile"):
        if key in layout:
            overrides[key] = str(layout[key])
    if "proxy_subdirs" in layout:
        overrides["proxy_subdirs"] = tuple(str(s) for s in layout["proxy_subdirs"])
    if "dir_mode" in layout:
        overrides["dir_mode"] = _parse_mode(layout["dir_mode"])

    for key in ("min_memory_gb", "min_disk_gb", "recommended_memory_gb", "recommended_disk_gb"):
        if key in requirements:
            overrides[key] = int(requirements[key])
    if "disk_path" in requirements:
        overrides["disk_path"] = str(requirements["disk_path"])

    if "install_url" in docker:
        overrides["docker_install_url"] = str(docker["install_url"])

    for key in ("wait_seconds", "health_timeout_seconds", "poll_interval_seconds"):
        if key in launch:
            overrides[key] = float(launch[key])
    if "log_tail" in launch:
        overrides["log_tail"] = int(launch["log_tail"])

    return replace(cfg, **overrides)


def load_deploy_config(path: Optional[str], *, project_dir: Optional[str] = None) -> DeployConfig:
    """Load the deploy config.

    Without an explicit path, ``deploy.yaml`` in the working directory is used
    when present; otherwise the built-in defaults apply. An explicit path that
    does not exist is an error.
    """

    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        path = str(candidate) if candidate.exists() else None

    if path is None:
        cfg = DeployConfig()
    else:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("deploy config must be YAML")

        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {p}: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError(f"{p.name} must contain a mapping/object")
        cfg = config_from_mapping(raw, base_dir=p.resolve().parent)

    if project_dir is not None:
        cfg = replace(cfg, project_dir=Path(project_dir).resolve())
    return cfg
