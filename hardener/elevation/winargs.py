"""
Windows command-line quoting.

Windows hands a process one command-line string, and the C runtime splits it
back into argv. join_windows_args() builds that string so the split yields
the original arguments byte for byte; split_windows_args() is the splitting
side of the same rules.
"""

_NEEDS_QUOTING = (" ", "\t", '"')


def needs_quoting(arg: str) -> bool:
    return arg == "" or any(c in arg for c in _NEEDS_QUOTING)


def quote_windows_arg(arg: str) -> str:
    """
    Quote one argument.

    Backslashes are literal unless they precede a quote: a run of N
    backslashes followed by a quote becomes 2N backslashes plus an escaped
    quote, and a trailing run is doubled before the closing quote.
    """
    if not needs_quoting(arg):
        return arg

    out = ['"']
    backslashes = 0
    for c in arg:
        if c == "\\":
            backslashes += 1
            continue
        if c == '"':
            out.append("\\" * (backslashes * 2))
            out.append('\\"')
        else:
            out.append("\\" * backslashes)
            out.append(c)
        backslashes = 0
    out.append("\\" * (backslashes * 2))
    out.append('"')
    return "".join(out)


def join_windows_args(args: list[str]) -> str:
    return " ".join(quote_windows_arg(a) for a in args)


def split_windows_args(cmdline: str) -> list[str]:
    """Split a parameter string the way the Microsoft C runtime builds argv."""
    args: list[str] = []
    current: list[str] = []
    in_quotes = False
    has_token = False
    i, n = 0, len(cmdline)

    while i < n:
        c = cmdline[i]

        if c == "\\":
            start = i
            while i < n and cmdline[i] == "\\":
                i += 1
            count = i - start
            if i < n and cmdline[i] == '"':
                current.append("\\" * (count // 2))
                if count % 2:
                    current.append('"')
                    i += 1
            else:
                current.append("\\" * count)
            has_token = True
            continue

        if c == '"':
            has_token = True
            if in_quotes and i + 1 < n and cmdline[i + 1] == '"':
                # "" inside a quoted run is a literal quote
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if c in " \t" and not in_quotes:
            if has_token:
                args.append("".join(current))
                current = []
                has_token = False
            i += 1
            continue

        current.append(c)
        has_token = True
        i += 1

    if has_token:
        args.append("".join(current))
    return args
