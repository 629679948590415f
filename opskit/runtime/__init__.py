"""
Subprocess execution utilities.
"""
from opskit.runtime.process import build_child_env, npm_global_bin_dir, run_npm_script

__all__ = [
    "build_child_env",
    "npm_global_bin_dir",
    "run_npm_script",
]
