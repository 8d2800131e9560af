# Sidebarctl Default Configuration
# Default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

from sidebarctl.config.schema import ICLOUD_DRIVE_PATH

DEFAULT_CONFIG: dict[str, Any] = {
    "shared_file_list_dir": None,
    "format": "auto",
    "reload": {
        "force": False,
        "after_apply": True,
    },
    "favorites": {
        "paths": [
            "~",
            "/Applications",
            "~/Downloads",
        ],
        "optional_paths": [
            ICLOUD_DRIVE_PATH,
        ],
    },
    "sections": [
        "all-hidden",
    ],
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# sidebarctl - Finder sidebar configuration
#
# favorites: written in order by `sidebarctl --apply`
#   - paths: always added
#   - optional_paths: added only when the path exists
#
# sections: sidebarsections toggles applied after the favorites, e.g.
#   hide-recents-shared, disable-bonjour, hide-computer, all-hidden,
#   locations-minimal
#
# format: auto | sfl3 | sfl4
#   auto picks sfl4 on macOS 26 and later, sfl3 before
#
# shared_file_list_dir: leave empty to use
#   ~/Library/Application Support/com.apple.sharedfilelist

"""
    return header + yaml.dump(get_default_config(), default_flow_style=False, sort_keys=False, allow_unicode=True)
