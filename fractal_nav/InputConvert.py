# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any

import sympy as sp

_JS_SPELLINGS = {
    "nan": math.nan,
    "infinity": math.inf,
    "+infinity": math.inf,
    "-infinity": -math.inf,
}


def InputConvert(obj: Any) -> float:
    """
    Convert the content of a view field to a real ``float``.

    Rules:
    - If `obj` is a number: cast via float(obj). Complex numbers must have a
      zero imaginary part.
    - If `obj` is a string:
        1) try float(s), including the ``NaN``/``Infinity`` spellings the
           fields themselves write
        2) else parse as a SymPy expression (``pi/4``, ``-3/8``, ``1e-3*2``)
           and evaluate it.

    Raises
    ------
    ValueError
        If the value is empty, not real, or cannot be parsed.

    Examples
    --------
    >>> InputConvert("-0.5")
    -0.5
    >>> InputConvert("3/4")
    0.75
    """
    if isinstance(obj, bool):
        raise ValueError(f"Could not convert {obj!r} to float.")

    if isinstance(obj, (int, float)):
        return float(obj)

    if isinstance(obj, complex):
        if obj.imag != 0:
            raise ValueError(
                f"Could not convert non-real {obj!r} to float: imaginary part is non-zero."
            )
        return float(obj.real)

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError("Cannot convert empty string to float.")

        special = _JS_SPELLINGS.get(s.lower())
        if special is not None:
            return special

        try:
            return float(s)
        except ValueError:
            pass

        try:
            expr = sp.sympify(s)
            # evalf() returns a SymPy Number; complex() covers Float and I-bearing results.
            val = complex(expr.evalf())
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to float (neither directly nor via SymPy)."
            ) from e
        if val.imag != 0:
            raise ValueError(
                f"Could not convert non-real {obj!r} to float: imaginary part is non-zero."
            )
        return float(val.real)

    try:
        return float(obj)
    except Exception as e:
        raise ValueError(f"Could not convert {obj!r} to float.") from e

# === END OF SECTION: InputConvert [id: InputConvert]===
