"""
Tests for policy/loader.py — YAML bundle loading and per-OS bundle selection.
"""

from pathlib import Path

import pytest

from hardener.errors import BundleError
from hardener.policy.loader import bundle_path_for, load_bundle

_REPO_POLICIES = Path(__file__).resolve().parent.parent / "policies"

_BUNDLE = """\
os: windows
policies:
  - id: WIN-1
    title: Password history
    category: Account Policies
    subcategory: Password Policy
    severity: medium
    levels: [L1, L2]
    tags: [password]
    check:
      kind: powershell
      timeout: 30
      script: |
        @{ compliant = $true } | ConvertTo-Json
    snapshot:
      kind: powershell
      script: net accounts
  - id: WIN-2
    title: No blocks
"""


class TestLoadBundle:
    def test_loads_policies(self, tmp_path):
        path = tmp_path / "bundle.yaml"
        path.write_text(_BUNDLE)
        b = load_bundle(path)
        assert b.os == "windows"
        assert [p.id for p in b.policies] == ["WIN-1", "WIN-2"]
        assert b.policies[0].levels == ("L1", "L2")
        assert b.policies[0].check.timeout == 30
        assert b.policies[0].check.script == "@{ compliant = $true } | ConvertTo-Json\n"
        assert b.policies[0].snapshot.timeout == 0
        assert b.policies[1].check is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(BundleError, match="read bundle"):
            load_bundle(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("policies: [unclosed\n")
        with pytest.raises(BundleError, match="parse bundle yaml"):
            load_bundle(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(BundleError):
            load_bundle(path)

    def test_empty_file_is_empty_bundle(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_bundle(path).policies == ()

    def test_scalars_keep_their_text(self, tmp_path):
        path = tmp_path / "bundle.yaml"
        path.write_text(
            "os: windows\n"
            "policies:\n"
            "  - id: 2.10\n"
            "    title: 1e3\n"
            "    severity: yes\n"
            "    category: 2024-01-01\n"
            "    levels: [01, 1.0]\n"
            "    tags: [true, off]\n"
            "    check: {kind: bash, timeout: 15, script: \"true\"}\n"
            "    snapshot:\n"
        )
        p = load_bundle(path).policies[0]
        assert (p.id, p.title, p.severity, p.category) == ("2.10", "1e3", "yes", "2024-01-01")
        assert p.levels == ("01", "1.0")
        assert p.tags == ("true", "off")
        assert p.check.timeout == 15
        assert p.snapshot is None

    def test_fractional_timeout_rejected(self, tmp_path):
        path = tmp_path / "bundle.yaml"
        path.write_text("policies:\n  - id: A\n    check: {kind: bash, timeout: 1.5, script: x}\n")
        with pytest.raises(BundleError, match="timeout"):
            load_bundle(path)

    @pytest.mark.parametrize("name", ["windows_policies.yaml", "linux_policies.yaml"])
    def test_shipped_bundles_load(self, name):
        b = load_bundle(_REPO_POLICIES / name)
        assert b.policies
        assert all(p.check is not None and p.snapshot is not None for p in b.policies)


class TestBundlePathFor:
    def test_windows(self):
        assert bundle_path_for("windows", Path("p")) == Path("p/windows_policies.yaml")

    @pytest.mark.parametrize("distro", ["ubuntu", "centos"])
    def test_linux_distros_share_bundle(self, distro):
        assert bundle_path_for(distro, Path("p")) == Path("p/linux_policies.yaml")

    def test_unknown_os(self):
        assert bundle_path_for("unknown", Path("p")) is None
