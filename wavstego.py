#!/usr/bin/env python3
"""
wavstego - Command Line Interface
Hide messages and files in WAV audio using LSB steganography
"""

import argparse
import logging
import sys

from wavsteg.acquire import DEFAULT_FFMPEG, DEFAULT_TIMEOUT
from wavsteg.config import StegoConfig, ENCODE, DECODE, CAPACITY
from wavsteg.errors import StegoError, ArgumentError
from wavsteg.pipeline import encode_cycle, decode_cycle, capacity_report
from wavsteg.utils import format_size


def setup_logging(verbosity: int):
    """Log pipeline progress to stderr; never logs passphrases or payloads."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def cmd_encode(config: StegoConfig) -> int:
    """Hide the message or file in the audio file."""
    report = encode_cycle(config)

    print("✓ Data hidden successfully!")
    print(f"  Output: {report.output_path}")
    print(f"  Hidden: {'file' if report.is_file else 'message'} "
          f"({format_size(report.container_size)}, "
          f"{format_size(report.ciphertext_size)} after compression and encryption)")
    print(f"  Samples used: {report.used_bits} of {report.capacity_bits}")
    return 0


def cmd_decode(config: StegoConfig) -> int:
    """Recover the hidden message or file."""
    result = decode_cycle(config)

    if result.is_file:
        print(f"✓ A file ({result.container.output_name()}) is extracted.")
        print(f"  Saved to: {result.saved_path}")
    else:
        print("The message contained in the file is:")
        print(result.text)
    return 0


def cmd_capacity(config: StegoConfig) -> int:
    """Show carrier capacity."""
    report = capacity_report(config)

    print(f"Carrier: {config.audio_path}")
    print(f"Format: {report['channels']} channel(s), {report['bit_depth']}-bit"
          f"{' float' if report['is_float'] else ''}")
    print(f"Capacity: {report['capacity_bits']} bits")
    print(f"Payload: {format_size(report['payload_bytes'])} "
          f"(after compression and encryption)")
    return 0


COMMANDS = {
    ENCODE: cmd_encode,
    DECODE: cmd_decode,
    CAPACITY: cmd_capacity,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wavstego',
        description='Hide messages and files in WAV audio using LSB steganography',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Hide a message (or the file notes.txt, if it exists)
  wavstego -e secret -m notes.txt -a cover.wav -o stego.wav

  # Recover it; files are written to the current directory
  wavstego -d secret -a stego.wav

  # Check how much fits in a carrier
  wavstego -c -a cover.wav
        """
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('-e', metavar='PIN', dest='encode_pin',
                      help='encode mode with pin set (at most 16 bytes)')
    mode.add_argument('-d', metavar='PIN', dest='decode_pin',
                      help='decode mode with pin set')
    mode.add_argument('-c', '--capacity', action='store_true',
                      help='show carrier capacity')

    parser.add_argument('-m', metavar='FILENAME', dest='message',
                        help='message file to hide (text if no such file)')
    parser.add_argument('-a', metavar='FILENAME', dest='audio', required=True,
                        help='audio file')
    parser.add_argument('-o', metavar='FILENAME', dest='output',
                        help='output audio file (encode only)')
    parser.add_argument('--ffmpeg', default=DEFAULT_FFMPEG,
                        help='ffmpeg binary used for non-WAV input (default: ffmpeg)')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT,
                        help='transcoding timeout in seconds (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='verbose output (-vv for debug)')
    return parser


def config_from_args(parser: argparse.ArgumentParser, args) -> StegoConfig:
    if args.encode_pin is not None:
        missing = [flag for flag, value in (('-m', args.message), ('-o', args.output))
                   if value is None]
        if missing:
            parser.error(f"encode mode requires {' and '.join(missing)}")
        mode, pin = ENCODE, args.encode_pin
    elif args.decode_pin is not None:
        mode, pin = DECODE, args.decode_pin
    else:
        mode, pin = CAPACITY, None

    return StegoConfig(
        mode=mode,
        audio_path=args.audio,
        passphrase=pin,
        message=args.message,
        output_path=args.output,
        ffmpeg=args.ffmpeg,
        transcode_timeout=args.timeout,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    config = config_from_args(parser, args)
    try:
        config.validate()
        return COMMANDS[config.mode](config)
    except ArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except StegoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
