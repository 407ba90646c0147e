from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional


class DeployError(Exception):
    pass


def resolve_remote(env: Optional[Mapping[str, str]] = None) -> str:
    """Push target: token-authenticated GitHub URL if configured, else the ``origin`` remote."""
    env = os.environ if env is None else env
    token = env.get("GH_TOKEN", "").strip()
    repo = env.get("GH_REPO", "").strip()
    if token and repo:
        return f"https://{token}@github.com/{repo}.git"
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise DeployError("No remote found. Set GH_TOKEN and GH_REPO or add an origin remote.") from exc
    remote = result.stdout.strip()
    if not remote:
        raise DeployError("The origin remote has no URL.")
    return remote


def deploy_site(output_dir: Path, remote: Optional[str] = None) -> None:
    if not output_dir.is_dir():
        raise DeployError(f"Output directory not found: {output_dir}. Run build first.")
    remote = remote or resolve_remote()
    print(f"Deploying {output_dir} to GitHub Pages...")
    # Never echo the remote: it may embed GH_TOKEN.
    command = ["npx", "gh-pages", "-d", str(output_dir), "-r", remote]
    try:
        subprocess.run(command, check=True)
    except FileNotFoundError as exc:
        raise DeployError("npx is not installed; gh-pages needs Node.js.") from exc
    except subprocess.CalledProcessError as exc:
        raise DeployError(f"gh-pages exited with status {exc.returncode}.") from None
    print("Deployed.")
