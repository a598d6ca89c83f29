# Bradford Arrington 2025
import sys

from bitio import CompressorBitio
from huff import COMPRESSION_NAME, USAGE, HuffException, expand_file
from perf import short_name, track_performance


def main(argv=None) -> int:
    arguments = sys.argv if argv is None else argv
    if len(arguments) < 3:
        print(f"\nUsage:  {short_name(arguments[0])} {USAGE}")
        return 0

    remaining_args = arguments[3:]
    try:
        print(f"\nDecompressing {arguments[1]} to {arguments[2]}")
        print(f"Using {COMPRESSION_NAME}\n")
        input_file = CompressorBitio.BitFile.open_input_bit_file(arguments[1])
        try:
            output = CompressorBitio.BitFile.open_output_bit_file(arguments[2])
            track_performance("ExpandFile", expand_file, input_file, output, remaining_args)
        finally:
            input_file.close_bit_file()
    except FileNotFoundError as e:
        print(f"Error: Input file '{e.filename}' not found.")
        return 1
    except (HuffException, OSError) as e:
        print(f"An error occurred: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
