"""
printf-style message rendering.

Messages travel through the sink tree as (format, args) and are rendered
only by the leaf sink that accepts them. The renderer is permissive:

    too few args    →  %!d(MISSING)
    too many args   →  ignored
    wrong type      →  %!d(str=abc)
    trailing "%"    →  %!(NOVERB)

It never raises.
"""

import json
import re
from typing import Any, Callable

_DIRECTIVE = re.compile(
    r"%(?P<flags>[-+# 0]*)(?P<width>\d+)?(?:\.(?P<prec>\d*))?(?P<verb>[A-Za-z%])?"
)


class LogClosure:
    """
    Deferred message text.

    Wrap an expensive computation and pass it as a format argument; the
    function runs only when a sink actually renders the message.

        log.debugf("state: %s", LogClosure(lambda: dump(state)))
    """

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[], str]):
        self._fn = fn

    def __str__(self) -> str:
        return self._fn()

    def __repr__(self) -> str:
        return f"LogClosure({self._fn!r})"


def sprintf(fmt: str, *args: Any) -> str:
    """Render a printf-style format string."""
    out: list[str] = []
    pos = 0
    argi = 0
    for m in _DIRECTIVE.finditer(fmt):
        out.append(fmt[pos:m.start()])
        pos = m.end()
        verb = m.group("verb")
        if verb is None:
            out.append("%!(NOVERB)")
            continue
        if verb == "%":
            out.append("%")
            continue
        if argi >= len(args):
            out.append(f"%!{verb}(MISSING)")
            continue
        arg = args[argi]
        argi += 1
        out.append(_render(verb, m.group("flags"), m.group("width"), m.group("prec"), arg))
    out.append(fmt[pos:])
    return "".join(out)


def go_str(value: Any) -> str:
    """Default (%v) rendering of a single value."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _render(verb: str, flags: str, width: str | None, prec: str | None, arg: Any) -> str:
    try:
        text = _convert(verb, flags, width, prec, arg)
    except Exception:
        text = None
    if text is None:
        try:
            shown = go_str(arg)
        except Exception:
            shown = "?"
        return f"%!{verb}({type(arg).__name__}={shown})"
    return text


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _number_spec(flags: str, width: str | None, prec: str | None, kind: str) -> str:
    spec = ""
    if "-" in flags:
        spec += "<"
    if "+" in flags:
        spec += "+"
    elif " " in flags:
        spec += " "
    if "#" in flags:
        spec += "#"
    if "0" in flags and "-" not in flags:
        spec += "0"
    spec += width or ""
    if prec is not None and kind in "eEfFgG":
        spec += "." + (prec or "0")
    return spec + kind


def _pad(text: str, flags: str, width: str | None, prec: str | None) -> str:
    if prec is not None:
        text = text[:int(prec or 0)]
    if width:
        align = "<" if "-" in flags else ">"
        text = format(text, f"{align}{width}")
    return text


def _convert(verb: str, flags: str, width: str | None, prec: str | None, arg: Any) -> str | None:
    """Returns None when the argument does not suit the verb."""
    if verb in ("v", "s"):
        return _pad(go_str(arg), flags, width, prec)

    if verb == "d":
        if not _is_int(arg):
            return None
        return format(arg, _number_spec(flags, width, None, "d"))

    if verb in "eEfFgG":
        if not (_is_int(arg) or isinstance(arg, float)):
            return None
        if prec is None and verb in "fFeE":
            prec = "6"
        return format(float(arg), _number_spec(flags, width, prec, verb))

    if verb in "xX":
        if _is_int(arg):
            return format(arg, _number_spec(flags, width, None, verb))
        if isinstance(arg, (str, bytes)):
            raw = arg.encode("utf-8") if isinstance(arg, str) else arg
            digits = raw.hex()
            return _pad(digits.upper() if verb == "X" else digits, flags, width, None)
        return None

    if verb in "ob":
        if not _is_int(arg):
            return None
        return format(arg, _number_spec(flags, width, None, verb))

    if verb == "c":
        if not _is_int(arg):
            return None
        return _pad(chr(arg), flags, width, None)

    if verb == "q":
        if _is_int(arg):
            return _pad("'" + chr(arg) + "'", flags, width, None)
        if isinstance(arg, (str, bytes)) or isinstance(arg, LogClosure):
            return _pad(json.dumps(go_str(arg), ensure_ascii=False), flags, width, None)
        return None

    if verb == "t":
        if not isinstance(arg, bool):
            return None
        return _pad(go_str(arg), flags, width, None)

    if verb == "T":
        return _pad(type(arg).__name__, flags, width, None)

    return None
