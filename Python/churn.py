import os
import sys
from datetime import datetime
from pathlib import Path

from bitio import CompressorBitio
from huff import HuffException, compress_file, expand_file
from perf import compression_ratio


class ChurnProgram:
    COMPRESSED_EXTENSIONS = {".zip", ".ice", ".lzh", ".arc", ".gif", ".pak", ".arj", ".gz", ".cmp"}

    def __init__(self, work_dir="."):
        self.total_files = 0
        self.total_passed = 0
        self.total_failed = 0
        self.compressed_name = os.path.join(work_dir, "TEST.CMP")
        self.expanded_name = os.path.join(work_dir, "TEST.OUT")
        self.log_name = os.path.join(work_dir, "CHURN.LOG")
        self.log_file = None

    def main(self, args) -> int:
        if len(args) != 1:
            self.usage()
            return 1

        root_dir = os.path.normpath(args[0]) + os.sep

        with open(self.log_name, "w", encoding="utf-8") as self.log_file:
            self.write_log_header()

            start_time = datetime.now()
            self.churn_files(root_dir)
            stop_time = datetime.now()

            self.write_log_summary(start_time, stop_time)
        return 0 if self.total_failed == 0 else 1

    def churn_files(self, path):
        try:
            entries = sorted(os.scandir(path), key=lambda entry: entry.name)
        except PermissionError as ex:
            print(f"Access denied to {path}: {ex}", file=sys.stderr)
            return

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                self.churn_files(entry.path)
            elif entry.is_file(follow_symlinks=False):
                if self.is_work_file(entry.path) or self.file_is_already_compressed(entry.path):
                    continue
                print(f"Testing {entry.path}", file=sys.stderr)
                if not self.compress(entry.path):
                    print("Comparison failed!", file=sys.stderr)

    def is_work_file(self, name):
        work_files = (self.compressed_name, self.expanded_name, self.log_name)
        return any(os.path.abspath(name) == os.path.abspath(work) for work in work_files)

    def file_is_already_compressed(self, name):
        return Path(name).suffix.lower() in self.COMPRESSED_EXTENSIONS

    def compress(self, file_name):
        self.log_file.write(f"{file_name:<40} ")
        self.total_files += 1
        try:
            self.run(compress_file, file_name, self.compressed_name)
            self.run(expand_file, self.compressed_name, self.expanded_name)
        except (HuffException, OSError) as ex:
            self.total_failed += 1
            self.log_file.write(f"Failed: {ex}\n")
            return False

        old_size = os.path.getsize(file_name)
        new_size = os.path.getsize(self.compressed_name)
        self.log_file.write(f" {old_size:8} {new_size:8} ")
        self.log_file.write(f"{compression_ratio(old_size, new_size):4}%  ")

        if not self.files_are_equal(file_name, self.expanded_name):
            self.log_file.write("Failed\n")
            self.total_failed += 1
            return False

        self.log_file.write("Passed\n")
        self.total_passed += 1
        return True

    @staticmethod
    def run(operation, input_name, output_name):
        input_file = CompressorBitio.BitFile.open_input_bit_file(input_name, pacifier=False)
        try:
            output = CompressorBitio.BitFile.open_output_bit_file(output_name, pacifier=False)
            operation(input_file, output)
        finally:
            input_file.close_bit_file()

    @staticmethod
    def files_are_equal(file1, file2):
        """Compare two files byte by byte"""
        if os.path.getsize(file1) != os.path.getsize(file2):
            return False

        with open(file1, "rb") as f1, open(file2, "rb") as f2:
            while True:
                byte1 = f1.read(4096)
                byte2 = f2.read(4096)

                if byte1 != byte2:
                    return False

                if not byte1:
                    return True

    def write_log_header(self):
        self.log_file.write("                                          Original   Packed\n")
        self.log_file.write("            File Name                     Size      Size   Ratio  Result\n")
        self.log_file.write("-------------------------------------     --------  --------  ----  ------\n")

    def write_log_summary(self, start_time, stop_time):
        elapsed_time = (stop_time - start_time).total_seconds()
        self.log_file.write(f"\nTotal elapsed time: {elapsed_time:.2f} seconds\n")
        self.log_file.write(f"Total files:   {self.total_files}\n")
        self.log_file.write(f"Total passed:  {self.total_passed}\n")
        self.log_file.write(f"Total failed:  {self.total_failed}\n")

    @staticmethod
    def usage():
        print("""
CHURN 1.0. Usage: CHURN root-dir

CHURN tests the Huffman compressor by compressing and expanding all files in a directory.
""")


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    return ChurnProgram().main(args)


if __name__ == "__main__":
    sys.exit(main())
