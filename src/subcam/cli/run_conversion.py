"""Core SUBCAM conversion execution logic.

This module contains the actual conversion runner, separated from argument
parsing. ``scripts/run_conversion.py`` and the ``subcam-convert`` console
script are thin wrappers around :func:`main`.
"""

import sys
import json
import logging
import argparse
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from subcam.pipeline.converter import ConversionResult, SubcamConverter
from subcam.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root logger with a console handler and an optional file handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)


def default_output_path(input_path: Path, mode: str) -> Path:
    """``survey_raw.csv`` -> ``survey_nmax.csv``; other names get a ``_<mode>`` suffix."""
    stem = input_path.stem
    for suffix in ("_raw2", "_raw"):
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]
            break
    return input_path.with_name(f"{stem}_{mode}.csv")


def run_conversion(
    input_path: str,
    mode: str = "nmax",
    output_path: Optional[str] = None,
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> ConversionResult:
    """Convert one raw CSV file and write the resulting matrix.

    This is the core execution function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Reads the input file and runs the requested conversion
    3. Writes the matrix CSV when the conversion succeeds

    Parameters
    ----------
    input_path : str
        Raw SUBCAM CSV file.
    mode : {"nmax", "obvs"}
        Matrix to produce.
    output_path : str, optional
        Destination CSV. Defaults to ``<input stem>_<mode>.csv`` beside the input.
    user_config_path : str, optional
        Python file holding a CONFIG dict.
    cli_args : dict, optional
        CLI overrides. Keys: min_confidence, min_quality, fill_missing_days,
        log_level. None values are ignored.
    verbose : bool, optional
        Print the full resolved configuration.

    Returns
    -------
    ConversionResult
        The conversion outcome; nothing is written on failure.

    Raises
    ------
    FileNotFoundError
        If the input or config file does not exist.
    ValidationError
        If configuration validation fails.

    Examples
    --------
    >>> run_conversion("data/site4_raw.csv", mode="obvs", cli_args={"min_confidence": 3})
    """
    if mode not in ("nmax", "obvs"):
        raise ValueError(f"Unknown mode: {mode}")

    param_cfg = ParamConfig()
    user_cfg_dict = load_user_config_dict(user_config_path) if user_config_path else {}
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_dict = {k: v for k, v in (cli_args or {}).items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    logging.getLogger("subcam").setLevel(config.logging.level)

    source = Path(input_path)
    if not source.exists():
        raise FileNotFoundError(f"Input not found: {source}")
    destination = Path(output_path) if output_path else default_output_path(source, mode)

    print(f"\n{'='*60}")
    print("SUBCAM Raw Conversion")
    print('='*60)
    print(f"Input:  {source}")
    print(f"Mode:   {mode}")
    print(f"Output: {destination}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    converter = SubcamConverter(config)
    csv_text = source.read_text(encoding="utf-8-sig")
    if mode == "nmax":
        result = converter.convert_raw_to_nmax(csv_text)
    else:
        result = converter.convert_raw_to_obvs(csv_text)

    if not result.success:
        logger.error("Conversion failed: %s", result.error)
        return result

    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(result.to_csv(), encoding="utf-8")
    logger.info("Wrote %s", destination)

    meta = result.metadata
    print(f"Rows in:    {meta.input_rows} ({meta.filtered_rows} aggregated)")
    print(f"Dates out:  {meta.output_rows}")
    print(f"Taxa:       {meta.species_count}")
    if meta.date_range is not None:
        print(f"Date range: {meta.date_range.start} .. {meta.date_range.end}")
    print(f"Compliance: {result.validation.format_compliance}%")
    for recommendation in result.validation.recommendations:
        print(f"  - {recommendation}")
    print(f"Time:       {meta.processing_time_ms} ms")

    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert SUBCAM raw observation CSV to daily Nmax/Obvs matrices")
    parser.add_argument("input", help="Raw SUBCAM CSV file")
    parser.add_argument("--mode", choices=["nmax", "obvs"], default="nmax", help="Matrix to produce")
    parser.add_argument("-o", "--output", help="Output CSV path")
    parser.add_argument("--config", help="Path to user config file")
    parser.add_argument("--min-confidence", type=int, help="Minimum confidence level")
    parser.add_argument("--min-quality", type=int, help="Minimum quality of video")
    parser.add_argument("--fill-missing-days", action="store_true", default=None,
                        help="Emit zero rows for days without observations")
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    cli_args = {
        "min_confidence": args.min_confidence,
        "min_quality": args.min_quality,
        "fill_missing_days": args.fill_missing_days,
        "log_level": "DEBUG" if args.verbose else None,
    }
    setup_logging("DEBUG" if args.verbose else "INFO", args.log_file)

    try:
        result = run_conversion(
            args.input,
            mode=args.mode,
            output_path=args.output,
            user_config_path=args.config,
            cli_args=cli_args,
            verbose=args.verbose,
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 2

    if not result.success:
        for entry in result.error_logs():
            print(f"ERROR: {entry.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
