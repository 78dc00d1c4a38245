import argparse
import os
import sys
from typing import List, Optional

from tqdm import tqdm

from hashpipe.io_utils import ALGORITHMS, drain, io_copy, new_hash
from hashpipe.pipe import new_reader, new_writer

COMMANDS = []


def command(fn):
    COMMANDS.append(fn)
    return fn


def command_name(fn) -> str:
    # trailing underscore keeps builtins like sum() unshadowed
    return fn.__name__.rstrip("_")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.add_argument("--algorithm", "-a", choices=ALGORITHMS, default="sha256")
    parser.add_argument("--quiet", "-q", action="store_true")
    return parser


def hash_file(path: str, algorithm: str, quiet: bool = False) -> str:
    hash = new_hash(algorithm)
    with open(path, "rb") as fp:
        with tqdm.wrapattr(
                fp, "read",
                total=os.path.getsize(path),
                desc=os.path.basename(path),
                leave=False,
                disable=quiet) as progress:
            drain(new_reader(hash)(progress))
    return hash.hexdigest()


def copy_file(src: str, dest: str, algorithm: str, quiet: bool = False) -> str:
    hash = new_hash(algorithm)
    with open(src, "rb") as src_fp, open(dest, "wb") as dest_fp:
        with tqdm.wrapattr(
                src_fp, "read",
                total=os.path.getsize(src),
                desc=os.path.basename(src),
                leave=False,
                disable=quiet) as progress:
            io_copy(progress, new_writer(hash)(dest_fp))
    return hash.hexdigest()


@command
def sum_(cmd_args) -> int:
    parser = _parser()
    parser.add_argument("files", nargs="+")
    args = parser.parse_args(cmd_args)

    result = 0
    for path in args.files:
        try:
            digest = hash_file(path, args.algorithm, args.quiet)
        except OSError as e:
            print(f"{path}: {e.strerror}", file=sys.stderr)
            result = 2
            continue
        print(f"{digest}  {path}")
    return result


@command
def copy(cmd_args) -> int:
    parser = _parser()
    parser.add_argument("src")
    parser.add_argument("dest")
    parser.add_argument("--expect", default=None)
    args = parser.parse_args(cmd_args)

    try:
        digest = copy_file(args.src, args.dest, args.algorithm, args.quiet)
    except OSError as e:
        print(f"{e.filename}: {e.strerror}", file=sys.stderr)
        return 2

    print(f"{digest}  {args.dest}")
    if args.expect is not None and args.expect.lower() != digest:
        print(f"Digest mismatch: expected {args.expect}, got {digest}", file=sys.stderr)
        return 1
    return 0


@command
def tee(cmd_args) -> int:
    parser = _parser()
    args = parser.parse_args(cmd_args)

    hash = new_hash(args.algorithm)
    stdout = sys.stdout.buffer
    io_copy(new_reader(hash)(sys.stdin.buffer), stdout)
    stdout.flush()
    print(f"{hash.hexdigest()}  -", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None):
    choices = [command_name(cmd) for cmd in COMMANDS]

    parser = argparse.ArgumentParser(prog="hashpipe")
    parser.add_argument("command", choices=choices)
    parser.add_argument("args", nargs=argparse.REMAINDER)
    args = parser.parse_args(argv)

    sys.exit(COMMANDS[choices.index(args.command)](args.args))


if __name__ == '__main__':
    main()
