"""Resource path resolution for bundled configuration files.

Typical usage:
    from taxiguide.core.resource_path import get_config_path

    routing_config = get_config_path("routing.yaml")
"""

from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    Returns:
        Path to project root (three levels up from src/taxiguide/core).
    """
    return Path(__file__).resolve().parent.parent.parent.parent


def get_resource_path(relative_path: str) -> Path:
    """Get absolute path to a resource file or directory.

    Args:
        relative_path: Relative path from project root (e.g., "config/logging.yaml")

    Returns:
        Absolute path to the resource.
    """
    return get_project_root() / relative_path


def get_config_path(config_file: str) -> Path:
    """Get path to a configuration file in the config directory.

    Args:
        config_file: Config filename (e.g., "routing.yaml").

    Returns:
        Absolute path to the configuration file.
    """
    return get_resource_path(f"config/{config_file}")
