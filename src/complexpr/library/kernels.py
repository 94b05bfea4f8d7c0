"""Jitted jax.numpy scalar kernels backing the numeric library functions."""

from __future__ import annotations

import math
from typing import Callable, Final

import jax

jax.config.update("jax_enable_x64", True)

from jax import lax  # noqa: E402
import jax.numpy as jnp  # noqa: E402
import jax.scipy.special as jsp  # noqa: E402

_UNARY_BASE: Final[dict[str, Callable[[jnp.ndarray], jnp.ndarray]]] = {
    "sin": jnp.sin,
    "cos": jnp.cos,
    "tan": jnp.tan,
    "sinh": jnp.sinh,
    "cosh": jnp.cosh,
    "tanh": jnp.tanh,
    "asin": jnp.arcsin,
    "acos": jnp.arccos,
    "atan": jnp.arctan,
    "asinh": jnp.arcsinh,
    "acosh": jnp.arccosh,
    "atanh": jnp.arctanh,
    "sqrt": jnp.sqrt,
    "exp": jnp.exp,
    "ln": jnp.log,
    "log10": jnp.log10,
    "log2": jnp.log2,
    "gamma": jsp.gamma,
    "abs": jnp.abs,
    "angle": jnp.angle,
}

_BINARY_BASE: Final[dict[str, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]]] = {
    "atan2": jnp.arctan2,
    "pow": jnp.power,
}

_JITTED_UNARY: dict[str, Callable[[jnp.ndarray], jnp.ndarray]] = {}
_JITTED_BINARY: dict[str, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]] = {}


def _jitted_unary_kernel(name: str) -> Callable[[jnp.ndarray], jnp.ndarray]:
    fn = _JITTED_UNARY.get(name)
    if fn is None:
        fn = jax.jit(_UNARY_BASE[name])
        _JITTED_UNARY[name] = fn
    return fn


def _jitted_binary_kernel(name: str) -> Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]:
    fn = _JITTED_BINARY.get(name)
    if fn is None:
        fn = jax.jit(_BINARY_BASE[name])
        _JITTED_BINARY[name] = fn
    return fn


def real_unary(name: str, x: float) -> float:
    """Real-valued kernel; results with no real value come back as NaN."""
    return float(_jitted_unary_kernel(name)(jnp.asarray(x, dtype=jnp.float64)))


def complex_unary(name: str, z: complex) -> complex:
    return complex(_jitted_unary_kernel(name)(jnp.asarray(z, dtype=jnp.complex128)))


def real_binary(name: str, x: float, y: float) -> float:
    return float(
        _jitted_binary_kernel(name)(
            jnp.asarray(x, dtype=jnp.float64),
            jnp.asarray(y, dtype=jnp.float64),
        )
    )


def complex_binary(name: str, z: complex, w: complex) -> complex:
    return complex(
        _jitted_binary_kernel(name)(
            jnp.asarray(z, dtype=jnp.complex128),
            jnp.asarray(w, dtype=jnp.complex128),
        )
    )


def gamma(x: float) -> float:
    if x < 0 and x.is_integer():
        return math.inf
    if x < 0:
        # reflection keeps the jax kernel on the positive half-line
        return math.pi / (math.sin(math.pi * x) * real_unary("gamma", 1.0 - x))
    return real_unary("gamma", x)


_LAMBERT_ITERATIONS: Final[int] = 50


@jax.jit
def _lambert_w_newton(a: jnp.ndarray) -> jnp.ndarray:
    def step(_i, x):
        ex = jnp.exp(x)
        nxt = x - (x * ex - a) / (ex * (1.0 + x))
        return jnp.where(jnp.isfinite(nxt), nxt, x)

    return lax.fori_loop(0, _LAMBERT_ITERATIONS, step, 0.75 * jnp.log(a + 1.0))


def lambert_w(x: float) -> float:
    """Principal branch of the Lambert W function, defined for x >= -1/e."""
    return float(_lambert_w_newton(jnp.asarray(x, dtype=jnp.float64)))
