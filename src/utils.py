import shutil
import subprocess

# --- Formatting ---

KB = 1024
MB = KB * 1024
GB = MB * 1024


def format_bytes(num_bytes):
    if num_bytes >= GB:
        return f"{num_bytes / GB:.1f} GB"
    if num_bytes >= MB:
        return f"{num_bytes / MB:.1f} MB"
    if num_bytes >= KB:
        return f"{num_bytes / KB:.1f} KB"
    return f"{num_bytes} B"


# --- Logic: Process helpers ---

def command_exists(cmd):
    return shutil.which(cmd) is not None


def run_nix(args, timeout=60):
    """Run a read-only nix tool and return its stdout.

    Raises subprocess.CalledProcessError when the tool exits non-zero and
    OSError when it cannot be started.
    """
    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        timeout=timeout,
        check=True,
    )
    return result.stdout
