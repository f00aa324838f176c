"""Graphviz rendering of an explored state space."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from buffer_cycle.checker.explorer import Exploration
from buffer_cycle.utils.logging import get_logger

logger = get_logger("checker.report")

TEMPLATES_DIR = Path(__file__).parent / "templates"
GRAPH_TEMPLATE = "state_graph.dot.j2"


class GraphRenderer:
    """Renders an Exploration as a DOT digraph."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        """
        Initialize the renderer.

        Args:
            templates_dir: Directory containing Jinja2 templates
        """
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, exploration: Exploration, name: str = "BufferCycle") -> str:
        """Render the reachable state graph."""
        template = self.env.get_template(GRAPH_TEMPLATE)
        dot = template.render(
            name=name,
            states=exploration.states,
            initial_states=exploration.initial_states,
            edges=exploration.edges,
            violating={v.state for v in exploration.violations},
        )
        logger.debug("graph_rendered", states=len(exploration.states))
        return dot

    def write(self, exploration: Exploration, path: Path) -> Path:
        """Render and write the graph to path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(exploration))
        logger.info("graph_written", path=str(path))
        return path


def render_dot(exploration: Exploration) -> str:
    """Render an exploration with the bundled template."""
    return GraphRenderer().render(exploration)
