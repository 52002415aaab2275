import os
import time
import getpass
import platform
import socket
from enum import Enum, IntEnum
from datetime import datetime
from tqdm import tqdm

# === COLORS ===
PURPLE = "\033[38;5;105m"  # Soft pastel purple (muted)
RESET = "\033[0m"

PROGRAM_NAME = "Pegcipher - Caesar Cipher Utility v1"
CHUNK_SIZE = 4096
MIN_PEG = 0
MAX_PEG = 255
TXT_EXTENSION = ".txt"
HISTORY_FILE = "history.md"
SEPARATOR = "-------------------"
LOG_FILE = None
LOG_WARNED = False

# === LOGGING ===
def get_timestamp():
    return datetime.now().strftime("%m%d%Y-%H%M%S")

def ensure_log_folder():
    if not os.path.exists("log"):
        os.makedirs("log")

def init_log():
    global LOG_FILE
    LOG_FILE = os.path.join("log", f"{PROGRAM_NAME}-{get_timestamp()}.log")
    try:
        ensure_log_folder()
        with open(LOG_FILE, "w", encoding="utf-8") as f:
            f.write(f"=== {PROGRAM_NAME} Session Log ===\n")
            f.write(f"Timestamp: {datetime.now()}\n")
            f.write(f"User: {getpass.getuser()}\n")
            f.write(f"Host: {socket.gethostname()}\n")
            f.write(f"OS: {platform.system()} {platform.release()} ({platform.version()})\n")
            f.write("==================================\n\n")
    except OSError as e:
        warn_log_unavailable(e)

def warn_log_unavailable(error):
    # Session log is diagnostic only; losing it never changes an outcome.
    global LOG_WARNED
    if not LOG_WARNED:
        print(f"⚠️ Warning: Session log unavailable ({error}).")
        LOG_WARNED = True

def log_action(message):
    if LOG_FILE is None:
        init_log()
    try:
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(f"[{datetime.now().strftime('%H:%M:%S')}] {message}\n")
    except OSError as e:
        warn_log_unavailable(e)

# === VALIDATION ===
def validate_extension(path: str) -> bool:
    """True when everything from the last '.' onward is exactly '.txt'."""
    dot = path.rfind(".")
    if dot == -1:
        return False
    return path[dot:] == TXT_EXTENSION

def validate_file(path: str) -> bool:
    """Check that path is a readable, non-empty .txt file without reading its content."""
    if not validate_extension(path):
        print(f"❌ Error: File '{path}' must have a {TXT_EXTENSION} extension.")
        log_action(f"❌ Rejected {path}: missing {TXT_EXTENSION} extension")
        return False

    try:
        with open(path, "rb") as f:
            f.seek(0, os.SEEK_END)
            size = f.tell()
    except OSError as e:
        print(f"❌ Error: Cannot open file '{path}'. Check if the file exists.")
        log_action(f"❌ Rejected {path}: cannot open ({e})")
        return False

    if size == 0:
        print(f"❌ Error: File '{path}' is empty.")
        log_action(f"❌ Rejected {path}: empty file")
        return False

    return True

def validate_shift(pegs: int) -> bool:
    return MIN_PEG <= pegs <= MAX_PEG

def validate_distinct(input_path: str, output_path: str) -> bool:
    # String comparison only; "a.txt" and "./a.txt" are treated as different files.
    return input_path != output_path

# === TRANSFORM ===
class Direction(Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"

def build_table(pegs: int, direction: Direction) -> bytes:
    if direction is Direction.ENCRYPT:
        return bytes((b + pegs) % 256 for b in range(256))
    return bytes((b - pegs + 256) % 256 for b in range(256))

def shift_bytes(data: bytes, pegs: int, direction: Direction) -> bytes:
    return data.translate(build_table(pegs, direction))

def transform(input_path: str, output_path: str, pegs: int, direction: Direction,
              chunk_size=None, show_progress=True) -> bool:
    """
    Stream input_path through the byte shift into output_path.

    Every failure is printed and logged and reported as False. A failed write
    leaves whatever was already written in output_path.
    """
    chunk_size = chunk_size or CHUNK_SIZE
    encrypting = direction is Direction.ENCRYPT
    verb = "Encrypting" if encrypting else "Decrypting"
    noun = "encryption" if encrypting else "decryption"

    try:
        fin = open(input_path, "rb")
    except OSError as e:
        print(f"❌ Error opening input file: {input_path}")
        log_action(f"❌ Failed to open input {input_path}: {str(e)}")
        return False

    try:
        fout = open(output_path, "wb", buffering=0)
    except OSError as e:
        fin.close()
        print(f"❌ Error opening output file: {output_path}")
        log_action(f"❌ Failed to open output {output_path}: {str(e)}")
        return False

    table = build_table(pegs, direction)
    log_action(f"{verb} {input_path} -> {output_path} (pegs: {pegs})")
    print(f"{verb} {input_path} -> {output_path} (Pegs: {pegs})")

    with fin, fout:
        filesize = os.fstat(fin.fileno()).st_size
        try:
            with tqdm(total=filesize, unit='B', unit_scale=True,
                      desc=f"{verb} {os.path.basename(input_path)}",
                      disable=not show_progress) as pbar:
                while chunk := fin.read(chunk_size):
                    written = fout.write(chunk.translate(table))
                    if written != len(chunk):
                        print(f"❌ Write error occurred during {noun}.")
                        log_action(f"❌ Short write to {output_path}: {written} of {len(chunk)} bytes")
                        return False
                    pbar.update(len(chunk))
        except OSError as e:
            print(f"❌ Write error occurred during {noun}.")
            log_action(f"❌ I/O error during {noun} of {input_path}: {str(e)}")
            return False

    print(f"✅ File {direction.value}ed successfully.")
    log_action(f"✅ {noun.capitalize()} finished: {output_path}")
    return True

def encrypt_file(input_path: str, output_path: str, pegs: int, **kwargs) -> bool:
    return transform(input_path, output_path, pegs, Direction.ENCRYPT, **kwargs)

def decrypt_file(input_path: str, output_path: str, pegs: int, **kwargs) -> bool:
    return transform(input_path, output_path, pegs, Direction.DECRYPT, **kwargs)

# === HISTORY ===
def format_record(input_path, output_path, pegs, date):
    date = date.rstrip("\n")
    return f"{input_path} -> {output_path} (pegs: {pegs}) | {date}\n"

def log_encryption(input_path: str, output_path: str, pegs: int) -> bool:
    """Append one record to HISTORY_FILE. Failure is only a warning."""
    record = format_record(input_path, output_path, pegs, time.ctime())
    try:
        with open(HISTORY_FILE, "a", encoding="utf-8") as f:
            f.write(record)
    except OSError as e:
        print("⚠️ Warning: Could not log encryption history.")
        log_action(f"⚠️ History append failed for {HISTORY_FILE}: {str(e)}")
        return False
    log_action(f"History: {record.rstrip()}")
    return True

def view_history() -> bool:
    try:
        with open(HISTORY_FILE, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except OSError:
        print("No encryption history found.")
        return False

    print("\nEncryption History:")
    print(SEPARATOR)
    for line in lines:
        print(line, end="")
    print(SEPARATOR)
    return True

# === FILES ===
def read_file(path: str) -> bool:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        print(f"❌ Error: Unable to open or process file '{path}'.\n"
              "Ensure the file exists and you have the necessary permissions.")
        log_action(f"❌ Failed to read {path}: {str(e)}")
        return False

    print("\nFile contents:")
    print(SEPARATOR)
    print(content)
    print(SEPARATOR)
    return True

def search_files(directory="."):
    try:
        with os.scandir(directory) as entries:
            names = sorted(e.name for e in entries if e.is_file(follow_symlinks=False))
    except OSError as e:
        print("❌ Error: Cannot open current directory.")
        log_action(f"❌ Failed to list {directory}: {str(e)}")
        return []

    print("\nFiles in current directory:")
    print(SEPARATOR)
    for name in names:
        print(name)
    print(SEPARATOR)
    print(f"Total files: {len(names)}")
    return names

# === MENU ===
class MenuChoice(IntEnum):
    ENCRYPT = 1
    DECRYPT = 2
    READ = 3
    SEARCH = 4
    HISTORY = 5
    EXIT = 6

def read_line(prompt):
    try:
        return input(prompt)
    except EOFError:
        return None

def prompt_request():
    """Ask for input file, output file and pegs, validating each as it arrives."""
    input_path = read_line("Enter input filename: ")
    if input_path is None:
        print("Input error. Try again.")
        return None
    if not validate_file(input_path):
        print("Input file validation failed.")
        return None

    output_path = read_line("Enter output filename: ")
    if output_path is None:
        print("Input error. Try again.")
        return None
    if not validate_extension(output_path):
        print(f"❌ Error: File '{output_path}' must have a {TXT_EXTENSION} extension.")
        log_action(f"❌ Rejected output {output_path}: missing {TXT_EXTENSION} extension")
        return None
    if not validate_distinct(input_path, output_path):
        print("❌ Input and output files must not be the same. Try again.")
        log_action(f"❌ Rejected {input_path}: output is the same path")
        return None

    raw = read_line(f"Enter number of pegs ({MIN_PEG} to {MAX_PEG}): ")
    if raw is None:
        print("Input error. Try again.")
        return None
    try:
        pegs = int(raw)
    except ValueError:
        pegs = None
    if pegs is None or not validate_shift(pegs):
        print(f"❌ Invalid peg value. Must be between {MIN_PEG} and {MAX_PEG}.")
        log_action(f"❌ Rejected peg value: {raw}")
        return None

    return input_path, output_path, pegs

def run_encrypt():
    request = prompt_request()
    if request is None:
        return
    if encrypt_file(*request):
        log_encryption(*request)
    else:
        print("❌ Encryption failed.")

def run_decrypt():
    request = prompt_request()
    if request is None:
        return
    if decrypt_file(*request):
        print("✅ Decryption successful.")
    else:
        print("❌ Decryption failed.")

def run_read():
    path = read_line("Enter filename to read: ")
    if path is not None:
        read_file(path)

ACTIONS = {
    MenuChoice.ENCRYPT: run_encrypt,
    MenuChoice.DECRYPT: run_decrypt,
    MenuChoice.READ: run_read,
    MenuChoice.SEARCH: search_files,
    MenuChoice.HISTORY: view_history,
}

def menu():
    init_log()
    while True:
        print(PURPLE + r"""
 ___  ___  ___   ___  ___  ___  _  _  ___  ___
| _ \| __|/ __| / __||_ _|| _ \| || || __|| _ \
|  _/| _|| (_ || (__  | | |  _/| __ || _| |   /
|_|  |___|\___| \___||___||_|  |_||_||___||_|_\

--- Caesar Cipher Utility ---
""" + RESET)
        print("1) Encrypt File")
        print("2) Decrypt File")
        print("3) Read File")
        print("4) Search Files")
        print("5) Encryption History")
        print("6) Exit")
        raw = read_line("Choose an option: ")
        if raw is None:
            print("Goodbye.")
            break
        try:
            number = int(raw)
        except ValueError:
            print("Invalid input. Please try again.")
            continue
        try:
            choice = MenuChoice(number)
        except ValueError:
            print("Invalid choice. Try again.")
            continue
        if choice is MenuChoice.EXIT:
            print("Goodbye.")
            break
        ACTIONS[choice]()

if __name__ == "__main__":
    menu()
