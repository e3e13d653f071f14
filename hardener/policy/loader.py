"""
Policy bundle loading from YAML files.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from hardener.errors import BundleError
from hardener.policy.models import Bundle

logger = logging.getLogger(__name__)


# Bundle file for each detected OS, relative to the policy directory
BUNDLE_FILES: dict[str, str] = {
    "windows": "windows_policies.yaml",
    "ubuntu": "linux_policies.yaml",
    "centos": "linux_policies.yaml",
}


# Scalars of these types stay as written; policy fields are text
_TEXT_TAGS = frozenset((
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
))


class BundleLoader(yaml.SafeLoader):
    """SafeLoader that keeps number- and bool-looking scalars as their source text."""


BundleLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_bundle(path: Path) -> Bundle:
    """Read and parse a YAML policy bundle. Raises BundleError on any failure."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise BundleError(f"read bundle: {e}") from e

    try:
        data = yaml.load(text, Loader=BundleLoader)
    except yaml.YAMLError as e:
        raise BundleError(f"parse bundle yaml: {e}") from e

    bundle = Bundle.from_dict(data)
    logger.info("Loaded %d policies from %s (os=%r)", len(bundle.policies), path, bundle.os)
    return bundle


def bundle_path_for(detected_os: str, policy_dir: Path) -> Optional[Path]:
    """Return the bundle file for a detected OS, or None if the OS is unsupported."""
    name = BUNDLE_FILES.get(detected_os)
    if name is None:
        return None
    return Path(policy_dir) / name
