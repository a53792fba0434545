from .step_00_check_preconditions import CheckPreconditionsStep
from .step_10_probe_environment import ProbeEnvironmentStep
from .step_20_install_docker import InstallDockerStep
from .step_30_create_directories import CreateDirectoriesStep
from .step_35_write_caddyfile import WriteCaddyfileStep
from .step_40_launch_stack import LaunchStackStep
from .step_50_health_check import HealthCheckStep
from .step_90_show_summary import ShowSummaryStep

__all__ = [
    "CheckPreconditionsStep",
    "ProbeEnvironmentStep",
    "InstallDockerStep",
    "CreateDirectoriesStep",
    "WriteCaddyfileStep",
    "LaunchStackStep",
    "HealthCheckStep",
    "ShowSummaryStep",
]
