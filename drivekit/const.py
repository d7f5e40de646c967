import os


VERSION = (0, 3, 1)
VERSION_STR = f"{VERSION[0]}.{VERSION[1]}.{VERSION[2]}{'-' +  str(VERSION[-1]) if len(VERSION) > 3 else ''}"


ARGV0 = "drivekit"
FRONTEND = "drivekit-frontend"
DESCRIPTION = "A compiler driver front-end with auditable command-line option handling"
GLOBAL_DK_DIR = os.path.join(os.path.expanduser("~"), ".drivekit")
GLOBAL_LOG_FILE = os.path.join(GLOBAL_DK_DIR, "drivekit.log")
GLOBAL_OPTIONS_FILE = os.path.join(GLOBAL_DK_DIR, "options.json")
EXTRA_ARGS_ENV = "DRIVEKIT_EXTRA_ARGS"
OPTIONS_ENV = "DRIVEKIT_OPTIONS"
SDKROOT_ENV = "SDKROOT"
STDLIB_MODULE_NAME = "Core"
DEFAULT_MODULE_NAME = "main"

SUPPORTED_MANIFEST = [
    "https://schemas.drivekit.dev/stable/drivekit.manifest.options.v1",
]
