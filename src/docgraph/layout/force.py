"""Force-directed layout.

Iterative velocity-Verlet simulation in the style of d3-force: many-body
repulsion, spring links, collision avoidance, weak x/y centering and a
center-of-mass correction. A fixed number of ticks is always run; there is
no convergence check.

Without position hints the starting positions are random, so results differ
between runs unless a ``seed`` is given.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from ..config.defaults import (
    FORCE_CENTER_STRENGTH,
    FORCE_CHARGE_DISTANCE_MAX,
    FORCE_COLLIDE_BUFFER,
    FORCE_COLLIDE_STRENGTH,
    FORCE_DOCUMENT_CHARGE,
    FORCE_EXTERNAL_CHARGE,
    FORCE_EXTERNAL_LINK_DISTANCE_FACTOR,
    FORCE_EXTERNAL_LINK_STRENGTH,
    FORCE_INTERNAL_LINK_STRENGTH,
    FORCE_ITERATIONS,
    FORCE_RANDOM_SPREAD,
    FORCE_VELOCITY_DECAY,
)
from ..core.models import EdgeType, GraphEdge, GraphNode, NodeType
from .options import LayoutOptions, node_size

ALPHA_MIN = 0.001


def _jiggle(rng: np.random.Generator, shape: tuple[int, ...]) -> np.ndarray:
    return (rng.random(shape) - 0.5) * 1e-6


def apply_force_layout(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    options: LayoutOptions | None = None,
    iterations: int = FORCE_ITERATIONS,
    seed: int | None = None,
) -> list[GraphNode]:
    """Position nodes with a physical simulation.

    Args:
        nodes: Nodes to position; non-zero positions are used as starting hints
        edges: Edges acting as springs; edges with a missing endpoint are ignored
        options: Layout options (separation, center)
        iterations: Number of simulation ticks
        seed: Seed for the random starting positions

    Returns:
        New node list with updated positions (inputs are not mutated)
    """
    if not nodes:
        return []

    opts = options or LayoutOptions()
    rng = np.random.default_rng(seed)
    n = len(nodes)

    # Starting positions: hints where present, random otherwise
    pos = np.empty((n, 2))
    for i, node in enumerate(nodes):
        pos[i, 0] = node.position.x or rng.random() * FORCE_RANDOM_SPREAD
        pos[i, 1] = node.position.y or rng.random() * FORCE_RANDOM_SPREAD
    # Break exact ties between coincident start positions
    pos += _jiggle(rng, pos.shape)
    vel = np.zeros((n, 2))

    is_external = np.array([node.type == NodeType.EXTERNAL for node in nodes])
    sizes = np.array([node_size(node, opts) for node in nodes])
    radii = sizes.max(axis=1) / 2 + FORCE_COLLIDE_BUFFER
    charges = np.where(is_external, FORCE_EXTERNAL_CHARGE, FORCE_DOCUMENT_CHARGE)

    index = {node.id: i for i, node in enumerate(nodes)}
    links = [
        (index[e.source], index[e.target], e.type == EdgeType.EXTERNAL)
        for e in edges
        if e.source in index and e.target in index and e.source != e.target
    ]

    base_distance = opts.node_separation + max(opts.node_width, opts.node_height) / 2
    if links:
        link_src = np.array([s for s, _, _ in links])
        link_tgt = np.array([t for _, t, _ in links])
        link_ext = np.array([ext for _, _, ext in links])
        link_distance = np.where(
            link_ext, base_distance * FORCE_EXTERNAL_LINK_DISTANCE_FACTOR, base_distance
        )
        link_strength = np.where(
            link_ext, FORCE_EXTERNAL_LINK_STRENGTH, FORCE_INTERNAL_LINK_STRENGTH
        )
        degree = np.bincount(np.concatenate([link_src, link_tgt]), minlength=n)
        link_bias = degree[link_src] / (degree[link_src] + degree[link_tgt])

    alpha = 1.0
    alpha_decay = 1 - ALPHA_MIN ** (1 / FORCE_ITERATIONS)
    center = np.array([opts.center_x, opts.center_y])

    for _ in range(iterations):
        alpha += (0.0 - alpha) * alpha_decay

        # Springs along edges
        if links:
            delta = (pos[link_tgt] + vel[link_tgt]) - (pos[link_src] + vel[link_src])
            zero = ~delta.any(axis=1)
            delta[zero] = _jiggle(rng, (int(zero.sum()), 2))
            length = np.linalg.norm(delta, axis=1)
            scale = (length - link_distance) / length * alpha * link_strength
            delta *= scale[:, None]
            np.add.at(vel, link_tgt, -delta * link_bias[:, None])
            np.add.at(vel, link_src, delta * (1 - link_bias)[:, None])

        # Many-body repulsion, limited to distance_max
        diff = pos[None, :, :] - pos[:, None, :]  # diff[i, j] = pos[j] - pos[i]
        dist2 = (diff**2).sum(axis=2)
        np.fill_diagonal(dist2, np.inf)
        dist2 = np.maximum(dist2, 1.0)
        in_range = dist2 < FORCE_CHARGE_DISTANCE_MAX**2
        weight = np.where(in_range, charges[None, :] * alpha / dist2, 0.0)
        vel += (diff * weight[:, :, None]).sum(axis=1)

        # Collision avoidance on predicted positions
        predicted = pos + vel
        diff = predicted[:, None, :] - predicted[None, :, :]  # diff[i, j] = p[i] - p[j]
        dist = np.sqrt((diff**2).sum(axis=2))
        np.fill_diagonal(dist, np.inf)
        reach = radii[:, None] + radii[None, :]
        overlapping = dist < reach
        if overlapping.any():
            dist = np.where(dist == 0, 1e-6, dist)
            push = np.where(overlapping, (reach - dist) / dist * FORCE_COLLIDE_STRENGTH, 0.0)
            share = radii[None, :] ** 2 / (radii[:, None] ** 2 + radii[None, :] ** 2)
            vel += (diff * (push * share)[:, :, None]).sum(axis=1)

        # Weak pull toward the configured center on each axis
        vel += (center - pos) * FORCE_CENTER_STRENGTH * alpha

        vel *= 1 - FORCE_VELOCITY_DECAY
        pos += vel

        # Keep the center of mass on the configured center
        pos -= pos.mean(axis=0) - center

    logger.debug(f"Force layout: {n} nodes, {len(links)} links, {iterations} ticks")

    return [
        node.with_position(float(pos[i, 0]), float(pos[i, 1]))
        for i, node in enumerate(nodes)
    ]
