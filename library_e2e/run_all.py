import subprocess
import sys
from pathlib import Path

from library_e2e.config import load_config

SUITE_DIR = Path(__file__).parent


def build_command(argv, config=None):
    """
    Builds the pytest command for the full suite.
    Adds parallel workers, failure re-runs and failure artifacts unless the
    caller already chose them.

    Args:
        argv: Extra command-line arguments, passed through to pytest.
        config: LibraryConfig; loaded from the environment if omitted.

    Returns:
        The command as a list of arguments.
    """
    config = config or load_config()
    cmd = [sys.executable, "-m", "pytest", str(SUITE_DIR)]

    if not any(arg.startswith("-n") or arg.startswith("--numprocesses") for arg in argv):
        cmd.extend(["-n", str(config.workers)])
    if not any(arg.startswith("--reruns") for arg in argv):
        cmd.extend(["--reruns", str(config.reruns)])
    if not any(arg.startswith("--output") for arg in argv):
        cmd.extend(["--output", str(config.artifacts_dir / "test-results")])

    cmd.extend(argv)
    return cmd


def main():
    """
    Main entry point for running the full suite.
    Passes any command-line arguments to pytest.
    """
    print("Running library E2E suite with pytest...")
    cmd = build_command(sys.argv[1:])
    print(f"Executing: {' '.join(cmd)}")
    result = subprocess.run(cmd)
    sys.exit(result.returncode)


if __name__ == "__main__":
    main()
