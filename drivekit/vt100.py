import sys


RED = "\033[31m"
GREEN = "\033[32m"
CYAN = "\033[36m"
WHITE = "\033[37m"
YELLOW = "\033[33m"
BRIGHT_BLACK = "\033[90m"

BOLD = "\033[1m"
UNDERLINE = "\033[4m"
RESET = "\033[0m"


def wordwrap(text: str, width: int = 60, newline: str = "\n") -> str:
    result = ""
    curr = 0

    for c in text:
        if c == " " and curr > width:
            result += newline
            curr = 0
        else:
            result += c
            curr += 1

    return result


def indent(text: str, indent: int = 4) -> str:
    return " " * indent + text.replace("\n", "\n" + " " * indent)


def title(text: str):
    print(f"{BOLD+WHITE+UNDERLINE}{text}{RESET}")


def subtitle(text: str):
    print(f"{BOLD+WHITE}{text}{RESET}:")


def error(msg: str) -> None:
    print(f"{RED}error:{RESET} {msg}", file=sys.stderr)


def warning(msg: str) -> None:
    print(f"{YELLOW}warning:{RESET} {msg}", file=sys.stderr)
