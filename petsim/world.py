"""Location graph helpers: reachability and multi-leg route planning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import networkx as nx

from .registry import ContentRegistry


@dataclass(frozen=True, slots=True)
class RoutePlan:
    stops: tuple[str, ...]
    energy_cost: int
    travel_ticks: int

    @property
    def legs(self) -> int:
        return max(0, len(self.stops) - 1)


def world_graph(registry: ContentRegistry) -> nx.DiGraph:
    """Directed graph of locations; edges carry energy cost and travel ticks."""

    graph = nx.DiGraph()
    for location in registry.locations.values():
        graph.add_node(location.id, name=location.name, kind=location.kind)
    for location in registry.locations.values():
        for connection in location.connections:
            graph.add_edge(
                location.id,
                connection.target_id,
                energy=connection.effective_energy_cost,
                ticks=connection.travel_ticks,
            )
    return graph


def reachable_from(registry: ContentRegistry, origin_id: str) -> set[str]:
    graph = world_graph(registry)
    if origin_id not in graph:
        return set()
    return set(nx.descendants(graph, origin_id)) | {origin_id}


def unreachable_locations(
    registry: ContentRegistry, origins: Iterable[str] = ("home",)
) -> list[str]:
    reachable: set[str] = set()
    for origin in origins:
        reachable |= reachable_from(registry, origin)
    return sorted(set(registry.locations) - reachable)


def plan_route(
    registry: ContentRegistry, origin_id: str, destination_id: str
) -> RoutePlan | None:
    """Cheapest route by energy, or ``None`` when no route exists."""

    graph = world_graph(registry)
    if origin_id not in graph or destination_id not in graph:
        return None
    try:
        stops = nx.shortest_path(graph, origin_id, destination_id, weight="energy")
    except nx.NetworkXNoPath:
        return None
    energy = 0
    ticks = 0
    for start, end in zip(stops, stops[1:]):
        edge = graph.edges[start, end]
        energy += edge["energy"]
        ticks += edge["ticks"]
    return RoutePlan(stops=tuple(stops), energy_cost=energy, travel_ticks=ticks)


__all__ = [
    "RoutePlan",
    "plan_route",
    "reachable_from",
    "unreachable_locations",
    "world_graph",
]
