#!/usr/bin/env python3
"""Render the location connection map of a content pack."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

import matplotlib.pyplot as plt
import networkx as nx
from matplotlib.lines import Line2D

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from petsim.config import SimConfig, configure_logging
from petsim.registry import ContentRegistry
from petsim.world import unreachable_locations, world_graph

KIND_COLOURS = {
    "home": "#f0a500",
    "town": "#98df8a",
    "wild": "#aec7e8",
}
GATED_EDGE_COLOUR = "#d62728"
OPEN_EDGE_COLOUR = "#7f7f7f"


def render_world_map(
    registry: ContentRegistry,
    output_path: Path,
    dpi: int = 200,
    seed: int = 42,
    size: float = 10.0,
) -> None:
    graph = world_graph(registry)
    pos = nx.spring_layout(graph, k=0.9, seed=seed)

    plt.figure(figsize=(size, size), dpi=dpi)

    node_colours = [
        KIND_COLOURS.get(graph.nodes[node].get("kind"), KIND_COLOURS["wild"])
        for node in graph.nodes
    ]
    nx.draw_networkx_nodes(
        graph, pos, node_color=node_colours, node_size=900, edgecolors="#333333"
    )
    labels = {node: graph.nodes[node].get("name", node) for node in graph.nodes}
    nx.draw_networkx_labels(graph, pos, labels=labels, font_size=7)

    # Edges into a location with entry requirements are drawn in red.
    gated = [
        (start, end)
        for start, end in graph.edges
        if not registry.locations[end].requirements.is_empty
    ]
    open_edges = [edge for edge in graph.edges if edge not in gated]
    for edges, colour in ((open_edges, OPEN_EDGE_COLOUR), (gated, GATED_EDGE_COLOUR)):
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=edges,
            edge_color=colour,
            arrows=True,
            arrowsize=10,
            connectionstyle="arc3,rad=0.08",
        )
    edge_labels = {
        (start, end): f"{data['energy']}e / {data['ticks']}t"
        for start, end, data in graph.edges(data=True)
    }
    nx.draw_networkx_edge_labels(graph, pos, edge_labels=edge_labels, font_size=5)

    legend_handles = [
        Line2D([], [], marker="o", linestyle="", color=colour, label=kind.title())
        for kind, colour in KIND_COLOURS.items()
    ]
    legend_handles.append(Line2D([], [], color=GATED_EDGE_COLOUR, label="Gated route"))
    plt.legend(handles=legend_handles, loc="upper left", frameon=False, fontsize=8)
    plt.axis("off")
    plt.tight_layout()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, bbox_inches="tight")
    plt.close()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--content",
        type=Path,
        default=None,
        help="Content TOML to render. Defaults to PETSIM_CONTENT_PATH or the bundled pack.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("img/world-map.png"),
        help="Where to write the rendered map image.",
    )
    parser.add_argument("--dpi", type=int, default=200, help="Rendering DPI.")
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed passed to the spring layout to produce stable results.",
    )
    parser.add_argument("--size", type=float, default=10.0, help="Figure size in inches.")

    args = parser.parse_args()
    config = SimConfig.from_env()
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    configure_logging(config)
    if args.content is not None:
        config.content_path = args.content
    registry = ContentRegistry.from_config(config)
    orphans = unreachable_locations(registry)
    if orphans:
        print(f"Warning: unreachable from home: {', '.join(orphans)}", file=sys.stderr)
    render_world_map(registry, args.output, dpi=args.dpi, seed=args.seed, size=args.size)


if __name__ == "__main__":
    main()
