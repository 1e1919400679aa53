# src/retro_chip8/cli.py
"""
コマンドラインエントリポイント。

    retro-chip8 run [PROGRAM] [--clock HZ] [--config FILE] [--display {qt,text,null}]
                    [--scale N] [--seed N] [--log FILE] [--verbose]

PROGRAMを省略するか "-" を指定した場合は標準入力からプログラムを読み込みます。
"""
import argparse
import logging
import signal
import sys
from typing import List, Optional

from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.builder import MachineBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig, DISPLAY_BACKENDS
from retro_chip8.loader.loader import ProgramLoader

logger = logging.getLogger("retro_chip8")

TRACE_LOGGER = "retro_chip8.debugger.executor"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 virtual machine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run a CHIP-8 program")
    run.add_argument("program", nargs="?", default="-",
                     help="Program binary to run (default: read from standard input)")
    run.add_argument("--clock", type=int, metavar="HZ",
                     help="Clock speed, in hz, to run at")
    run.add_argument("--config", metavar="FILE",
                     help="YAML machine configuration")
    run.add_argument("--display", choices=DISPLAY_BACKENDS,
                     help="Display backend")
    run.add_argument("--scale", type=int, metavar="N",
                     help="Pixel scale of the Qt window")
    run.add_argument("--seed", type=int, metavar="N",
                     help="Seed for the RND instruction")
    run.add_argument("--log", metavar="FILE",
                     help="Write log output, including the per-instruction trace, to FILE")
    run.add_argument("--verbose", action="store_true",
                     help="Enable per-instruction debug logging")
    return parser


# @intent:responsibility ログの出力先とレベルを設定します。
# @intent:post-condition --verboseまたは--logの指定で、実行ループの命令単位トレースが有効になります。
def configure_logging(log_file: Optional[str], verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif log_file:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        filename=log_file,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if log_file:
        logging.getLogger(TRACE_LOGGER).setLevel(logging.DEBUG)


# @intent:responsibility 構成ファイル（または既定値）にコマンドライン引数の上書きを適用します。
def load_config(args: argparse.Namespace) -> MachineConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()
    if args.clock is not None:
        config.clock_hz = args.clock
    if args.display is not None:
        config.display.backend = args.display
    if args.scale is not None:
        config.display.scale = args.scale
    if args.seed is not None:
        config.seed = args.seed
    return config.validate()


def run(args: argparse.Namespace) -> int:
    config = load_config(args)
    builder = MachineBuilder()
    display = builder.create_display(config)
    keypad = builder.create_keypad(config)
    machine = builder.build(config, display=display, keypad=keypad)

    loader = ProgramLoader()
    if args.program == "-":
        loader.load_stream(machine.bus, sys.stdin.buffer, config.memory.program_start)
    else:
        loader.load_file(machine.bus, args.program, config.memory.program_start)

    if config.display.backend == "qt":
        from retro_chip8.ui.app import run_gui
        return run_gui(machine, display, keypad, scale=config.display.scale)

    def request_stop(signum, frame):
        logger.info("received signal %d, stopping", signum)
        machine.executor.stop()

    previous = {signum: signal.signal(signum, request_stop) for signum in (signal.SIGINT, signal.SIGTERM)}
    try:
        reason = machine.executor.run()
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
    logger.info("execution finished: %s", reason.value)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log, args.verbose)
    try:
        return run(args)
    except Chip8Error as e:
        logger.error("%s", e)
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
