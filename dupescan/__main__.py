"""
Allow running the package with: python -m dupescan

Examples:
    python -m dupescan /path/to/photos        # Scan and print duplicates
    python -m dupescan config                 # Show config file and values
    python -m dupescan config --init          # Create example config file
    python -m dupescan config --config-dir D  # Use D instead of ~/.dupescan
"""

import argparse
import sys


def _config_command(argv) -> int:
    from .user_config import UserConfig, get_user_config

    parser = argparse.ArgumentParser(prog="dupescan config", description="Show or create the user config file")
    parser.add_argument("-i", "--init", action="store_true", help="Create an example config file")
    parser.add_argument("--config-dir", default=None, help="Config directory (default: ~/.dupescan)")
    args = parser.parse_args(argv)

    config = UserConfig(args.config_dir) if args.config_dir else get_user_config()

    if args.init:
        if config.create_example_config():
            print("Created example configuration file at:")
            print(f"  {config.config_file_path}")
            return 0
        print("Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: found")
    else:
        print("Status: not found (using defaults)")
        print("\nRun 'python -m dupescan config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  workers: {config.workers}")
    print(f"  max_concurrent_dirs: {config.max_concurrent_dirs}")
    print(f"  grid: {config.grid_width}x{config.grid_height}")
    print(f"  max_image_pixels: {config.max_image_pixels:,}")
    print(f"  follow_symlinks: {config.follow_symlinks}")
    return 0


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == 'config':
        return _config_command(argv[1:])

    from .cli import main as cli_main
    return cli_main(argv)


if __name__ == '__main__':
    sys.exit(main())
