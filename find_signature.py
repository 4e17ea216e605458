#!/usr/bin/env python3

# Scan a file for a byte signature and print what the placeholders matched.
#
#   find_signature.py image.bin "34 __ 00 ??"
#   find_signature.py --elf game "????????  ????0000 0C000000"
#
# One line per hit: "0x<offset> 0x<byte>" for each ?? capture, or just
# "0x<offset>" per matching window if the signature has no ?? (or with
# --offsets). With --elf, offsets become virtual addresses.

import argparse
import logging
import mmap
import sys

from elftools.common.exceptions import ELFError

from helper import ELFReader, load
from pattern import BinmatchError, ElementKind, compile


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Scan a file for a byte signature")
    parser.add_argument("path", help="File to scan")
    parser.add_argument("signature", help='Signature like "00 __ 00 ??" (quote it if it has spaces)')
    parser.add_argument("--elf", action="store_true", help="Treat the file as ELF and print virtual addresses")
    parser.add_argument("--offsets", action="store_true", help="Print the start of each matching window instead of captures")
    parser.add_argument("--first", action="store_true", help="Only report whether there is a match")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        pattern = compile(args.signature)
    except BinmatchError as e:
        print("Bad signature: %s" % e, file=sys.stderr)
        return 2

    reader = None
    try:
        if args.elf:
            reader = ELFReader(args.path)
            data = reader.data
        else:
            data = load(args.path)
    except (OSError, ELFError) as e:
        print("Could not load %s: %s" % (args.path, e), file=sys.stderr)
        return 2

    def locate(offset):
        if reader is None:
            return offset
        return reader.virtual_address_for_match(offset)

    try:
        return scan(pattern, data, locate, args)
    finally:
        if reader is not None:
            reader.close()
        elif isinstance(data, mmap.mmap):
            data.close()


def scan(pattern, data, locate, args):
    hasPlaceholders = any(e.kind is ElementKind.PLACEHOLDER for e in pattern)

    if args.first:
        if args.elf:
            found = any(locate(x) is not None for x in pattern.find_match_offsets(data))
        else:
            found = pattern.has_match(data)
        print("match" if found else "no match")
        return 0 if found else 1

    found = False
    if hasPlaceholders and not args.offsets:
        for value, offset in pattern.find_matches_with_index(data):
            address = locate(offset)
            if address is None:
                continue
            print("0x%X 0x%02X" % (address, value))
            found = True
    else:
        for offset in pattern.find_match_offsets(data):
            address = locate(offset)
            if address is None:
                continue
            print("0x%X" % address)
            found = True

    return 0 if found else 1


if __name__ == "__main__":
    sys.exit(main())
