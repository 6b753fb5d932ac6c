"""Uniform random-sample source for Monte Carlo estimation.

Every stochastic decision in the renderer (pixel jitter, hemisphere
directions, reflect/transmit selection) draws from these two functions so
that the source of randomness is in one place.

Taichi keeps an independent generator state per parallel thread, which means
each pixel being rendered draws statistically independent sequences without
any shared state. The sequence is seeded through ``ti.init(random_seed=...)``.

Example:
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     return get_sample()
"""

import taichi as ti
import taichi.math as tm

vec2 = tm.vec2


@ti.func
def get_sample() -> ti.f32:
    """Draw a uniform float in [0, 1)."""
    return ti.random(ti.f32)


@ti.func
def get_sample_2d() -> vec2:
    """Draw two independent uniform floats in [0, 1).

    Returns:
        A vec2 (s, t) with both components in [0, 1).
    """
    s = get_sample()
    t = get_sample()
    return vec2(s, t)
