"""NoiseLang entrypoint module exposing the public API and CLI."""

import argparse
import logging
import os
import sys

from noise_lang import (
    ConsoleIO,
    NoiseInterpreter,
    PreviewSettings,
    SessionController,
    Status,
)

__all__ = ["run_repl", "main"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def run_repl(session: SessionController):  # pragma: no cover
    print("NoiseLang interactive session")
    print("Type 'show 500x500' to preview the output module, 'exit' to leave.")
    session.start_reading()


def _configure_logging(log_file, level_name):
    level = getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{level_name}'")
    if log_file:
        logging.basicConfig(
            filename=log_file, level=level, filemode="w", format=LOG_FORMAT
        )
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv=None):
    parser = argparse.ArgumentParser(description="NoiseLang noise-graph interpreter")
    parser.add_argument("script", nargs="?", help="Path to a NoiseLang script")
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Keep reading statements after the script has run",
    )
    parser.add_argument("--log-file", help="Write the log to this file")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("NOISELANG_LOG_LEVEL", "WARNING"),
        help="Logging level (default: NOISELANG_LOG_LEVEL or WARNING)",
    )
    args = parser.parse_args(argv)

    try:
        _configure_logging(args.log_file, args.log_level)
    except ValueError as e:
        parser.error(str(e))

    io = ConsoleIO()
    base_path = os.path.dirname(os.path.abspath(args.script)) if args.script else None
    interpreter = NoiseInterpreter(base_path=base_path, io_handler=io)
    session = SessionController(interpreter, io, PreviewSettings.from_env())

    if not args.script:
        run_repl(session)
        return 0

    status = session.run_script(os.path.abspath(args.script))
    if args.interactive:
        run_repl(session)
    else:
        session.wait_for_preview()
    return 0 if status is Status.OK else 1


if __name__ == "__main__":
    sys.exit(main())
