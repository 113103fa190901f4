"""Pytest fixtures for nixscope tests."""

from pathlib import Path

import pytest


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Create files (and their directories) under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


FLAKE = """\
{
  description = "nix-me";

  outputs = { self, nixpkgs, darwin, ... }:
    let
      hosts = {
        batman = { machineType = "macbook"; user = "batman"; };
        "robin" = {
          user = "robin";
          machineType = "macmini";
        };
      };
    in { };
}
"""


@pytest.fixture
def nix_repo(tmp_path: Path) -> Path:
    """A small configuration repository with shared, macbook and macmini hosts."""
    return write_files(
        tmp_path,
        {
            "flake.nix": FLAKE,
            "hosts/shared/default.nix": """\
{ pkgs, ... }:
{
  imports = [
    ../../modules/darwin
    ./fonts.nix
  ];
  environment.systemPackages = with pkgs; [ git curl ];
}
""",
            "hosts/shared/fonts.nix": "{ ... }: { }\n",
            "hosts/macbook/default.nix": """\
{ ... }:
{
  imports = [ ../../modules/darwin/homebrew.nix ];
  homebrew.casks = [ "raycast" "arc" ];
}
""",
            "hosts/macmini/default.nix": "{ ... }: { }\n",
            "hosts/profiles/default.nix": "{ ... }: { }\n",
            "modules/darwin/default.nix": """\
{ ... }:
{
  imports = [
    ./homebrew.nix
    # ./disabled.nix
  ];
}
""",
            "modules/darwin/homebrew.nix": """\
{ ... }:
{
  homebrew = {
    brews = [ "wget" "jq" ];
    casks = [ "firefox" ];
  };
}
""",
            "home-configurations/batman.nix": "{ ... }: { }\n",
            "node_modules/pkg/ignored.nix": "{ imports = [ ./x.nix ]; }\n",
            ".direnv/hidden.nix": "{ }\n",
        },
    )
