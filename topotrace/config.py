"""Configuration classes for topotrace components."""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Tunables shared by the algorithm engine."""

    # Residual capacity below this value is treated as saturated
    min_capacity: float = 2**-12

    # Fleury stops after (link count + 2) * factor moves
    fleury_iteration_factor: int = 2

    # Separator used when a node path is rendered into a log line
    path_separator: str = " -> "

    def fleury_max_moves(self, link_count: int) -> int:
        """Upper bound on Fleury moves for a graph with ``link_count`` links."""
        return (link_count + 2) * self.fleury_iteration_factor


# Global configuration instance
ENGINE_CONFIG = EngineConfig()
