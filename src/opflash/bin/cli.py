#!/usr/bin/env python3
"""Command-line entry point of the optical flash finder."""

import argparse
import os
import pathlib
import sys
from typing import List, Optional

from opflash.config import ConfigPathError, apply_overrides, load_config_file
from opflash.version import __version__


def main(
    config: str,
    source: Optional[List[str]] = None,
    source_list: Optional[str] = None,
    output: Optional[str] = None,
    hit_output: Optional[str] = None,
    n: Optional[int] = None,
    nskip: Optional[int] = None,
    entry_list: Optional[str] = None,
    skip_entry_list: Optional[str] = None,
    config_overrides: Optional[List[str]] = None,
):
    """Main driver for flash finding.

    Performs these basic functions:
    - Update the configuration with the command-line arguments
    - Run the flash finder on the requested entries

    Parameters
    ----------
    config : str
        Path to the configuration file
    source : List[str], optional
        List of paths to the input files
    source_list : str, optional
        Path to a text file containing a list of data file paths
    output : str, optional
        Path to the output flash file
    hit_output : str, optional
        Path to the output hit file
    n : int, optional
        Number of entries to process
    nskip : int, optional
        Number of entries to skip
    entry_list : str, optional
        Path to a text file containing a list of entries to process
    skip_entry_list : str, optional
        Path to a text file containing a list of entries to skip
    config_overrides : List[str], optional
        List of config overrides in the form "key.path=value"
    """
    # Load the configuration file
    if not os.path.isfile(config):
        raise ConfigPathError(f"Configuration file not found: {config}")
    cfg = load_config_file(config)

    # If there is no base block, build one
    if "base" not in cfg or cfg["base"] is None:
        cfg["base"] = {}

    # Propagate the configuration parent directory to enable relative paths
    cfg["base"]["parent_path"] = str(pathlib.Path(config).resolve().parent)

    # The configuration must minimally contain an IO block with a reader
    if "io" not in cfg or "reader" not in cfg["io"]:
        raise KeyError("Configuration file must contain an `io.reader` block.")

    # Override the input command-line information into the configuration
    if isinstance(cfg["io"]["reader"], str):
        cfg["io"]["reader"] = {"name": cfg["io"]["reader"]}
    io_mapping = {
        "file_keys": source if source is not None else source_list,
        "n_entry": n,
        "n_skip": nskip,
        "entry_list": entry_list,
        "skip_entry_list": skip_entry_list,
    }
    for io_key, io_value in io_mapping.items():
        if io_value is not None:
            cfg["io"]["reader"][io_key] = io_value

    # Override the output path if provided
    if output is not None:
        writer = cfg["io"].get("writer") or {"name": "csv"}
        if isinstance(writer, str):
            writer = {"name": writer}
        writer["file_name"] = output
        cfg["io"]["writer"] = writer
    if hit_output is not None:
        hit_writer = cfg["io"].get("hit_writer") or {"name": "csv"}
        if isinstance(hit_writer, str):
            hit_writer = {"name": hit_writer}
        hit_writer["file_name"] = hit_output
        cfg["io"]["hit_writer"] = hit_writer

    # Apply any generic config overrides from --set arguments
    if config_overrides:
        cfg = apply_overrides(cfg, config_overrides)

    # Only import the driver stack once the configuration is complete
    from opflash.main import run

    run(cfg)


def cli():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="opflash - Optical flash finder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  opflash --version                                Show version information
  opflash -c config.yaml                           Find flashes with a config file
  opflash -c config.yaml -s hits.csv -o flashes.csv
  opflash -c config.yaml --set flash.bin_width=8   Override config parameters
  opflash -c config.yaml --set flash.flash_threshold=50 --set base.verbosity=debug
""",
    )

    # Add a version command
    parser.add_argument(
        "--version", "-v", action="version", version=f"opflash {__version__}"
    )

    # Add config file argument
    parser.add_argument(
        "-c", "--config", required=True, help="Path to the configuration file"
    )

    # Add mutually exclusive group for source input
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-s", "--source", nargs="+", type=str, help="List of paths to the input files"
    )
    group.add_argument(
        "-S",
        "--source-list",
        help="Path to a text file containing a list of data file paths",
    )

    # Add output argument
    parser.add_argument("-o", "--output", help="Path to the output flash file")
    parser.add_argument("--hit-output", help="Path to the output hit file")

    # Add entry and skip arguments
    parser.add_argument(
        "-n", "--iterations", type=int, help="Number of entries to process"
    )

    parser.add_argument("--nskip", type=int, help="Number of entries to skip")

    parser.add_argument(
        "--entry-list",
        help="Path to a text file containing a list of entries to process",
    )

    parser.add_argument(
        "--skip-entry-list",
        help="Path to a text file containing a list of entries to skip",
    )

    # Add option to dynamically override any config parameter using dot notation
    parser.add_argument(
        "--set",
        action="append",
        dest="config_overrides",
        metavar="KEY=VALUE",
        help="Override any config parameter using dot notation "
        "(e.g., --set flash.bin_width=8). "
        "Can be used multiple times for multiple overrides.",
    )

    # If no arguments provided, show help
    if len(sys.argv) == 1:
        parser.print_help()
        return

    args = parser.parse_args()

    main(
        config=args.config,
        source=args.source,
        source_list=args.source_list,
        output=args.output,
        hit_output=args.hit_output,
        n=args.iterations,
        nskip=args.nskip,
        entry_list=args.entry_list,
        skip_entry_list=args.skip_entry_list,
        config_overrides=args.config_overrides,
    )


if __name__ == "__main__":
    cli()
