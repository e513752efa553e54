from __future__ import annotations
import json
import logging
import os
import sys

from arithmetic import RoundingMode
from formats import get_float_format
from fraction import Fraction, of_exact, of_simplest
from parsing import ParseError, parse_fraction, load_fractions_from_npy

COMMANDS = ("exact", "simplest", "cf", "repeating", "mixed", "decimal", "float", "npy")
DECIMAL_DIGITS = 20

class FractionEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Fraction):
            return str(obj)
        return super().default(obj)

def usage() -> str:
    return (f"Usage: {sys.argv[0]} <command> <value> [format]\n"
            f"  commands: {', '.join(COMMANDS)}\n"
            "  exact/simplest/float take a float literal and a format (default double),\n"
            "  cf/repeating/mixed/decimal take a fraction literal (\"22/7\", \"5 3/4\", \"0.1\"),\n"
            "  npy takes the path of a float .npy array")

def run(command: str, value: str, format_name: str | None = None) -> str:
    fmt = get_float_format(format_name or "double")
    if command in ("exact", "simplest"):
        # nearest value of the format to the literal, rounded once
        x = parse_fraction(value).to_format(fmt)
        f = of_exact(x, fmt) if command == "exact" else of_simplest(x, fmt)
        return str(f)
    if command == "npy":
        return json.dumps(load_fractions_from_npy(value), cls=FractionEncoder)

    f = parse_fraction(value)
    if command == "cf":
        return str(f.continued_fraction())
    if command == "repeating":
        return f.to_repeating_string()
    if command == "mixed":
        return f.to_mixed_string()
    if command == "decimal":
        return f.to_string(DECIMAL_DIGITS, rounding=RoundingMode.HALF_EVEN)
    if command == "float":
        return str(f.to_format(fmt))
    raise ValueError(f"Unknown command '{command}'")

def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if os.environ.get("FRACTOOL_DEBUG"):
        logging.basicConfig(level=logging.DEBUG)
    if len(args) not in (2, 3) or args[0] not in COMMANDS:
        print(usage())
        sys.exit(1)

    try:
        print(run(*args))
    except ParseError as e:
        print(f"Error parsing value: {e}"); sys.exit(1)
    except FileNotFoundError:
        print(f"Error: file not found: {args[1]}"); sys.exit(1)
    except NotImplementedError as e:
        print(f"Error: {e}"); sys.exit(1)
    except (ValueError, ArithmeticError, TypeError) as e:
        print(f"Error: {e}"); sys.exit(1)

if __name__ == "__main__":
    main()
