# huffman_tool.py
# Command line front end for the Huffman text codec

"""
Huffman coding tool

How to run:
  python huffman_tool.py encode            (prompts for one line of text)
  python huffman_tool.py decode            (prints the text stored in encoded.dat)
  python huffman_tool.py decode --file other.dat --verbose
"""

import argparse
import logging
from typing import List, Optional

import container
from errors import EmptyInputError, HuffmanError, ResourceExhaustionError

BANNER = "Huffman Coding Tool v1.0"
MODES = ("encode", "decode")


def print_usage() -> None:
    print("Please specify whether you want to decode or encode text:")
    print("huffman-tool decode")
    print("OR")
    print("huffman-tool encode")


def run_encode(path: str) -> None:
    try:
        text = input("Enter the text you would like to encode: ")
    except EOFError as exc:
        raise EmptyInputError("standard input closed before a line was read") from exc
    if not text:
        print("Got an empty string")
        return
    container.encode_to_file(text, path)
    print("Done")


def run_decode(path: str) -> None:
    print("Decoded text: " + container.decode_from_file(path))


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Encode or decode text with a Huffman prefix code")
    ap.add_argument("mode", nargs="?", help="'encode' or 'decode'")
    ap.add_argument("--file", type=str, default=container.OUTPUT_FILENAME,
                    help="Container file to write (encode) or read (decode)")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(BANNER)

    # Unknown or missing directive is a no-op, not a failure
    if args.mode is None:
        print_usage()
        return 0
    if args.mode not in MODES:
        print(f"Unknown mode: {args.mode}")
        return 0

    decode = args.mode == "decode"
    try:
        if decode:
            run_decode(args.file)
        else:
            run_encode(args.file)
    except (HuffmanError, OSError) as e:
        print("A fatal error occurred while doing the job:")
        print(f"{type(e).__name__}: {e}")
        if not decode and isinstance(e, ResourceExhaustionError):
            print("[Note] Looks like you requested a really large text to be encoded")
            print("[Note] To fix this error, try to raise the memory limit or the recursion limit")
        print("Sorry")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
