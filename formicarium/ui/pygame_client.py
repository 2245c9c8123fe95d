"""Pygame 2D visualization for the Formicarium simulation.

Renders the trace field, nest, morsels and ants in a window from the
engine's read-only entity snapshot.  The simulation steps at a
configurable generation rate while the display refreshes at the Pygame
frame rate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from formicarium.simulation.engine import Simulation

from formicarium.colony.ant import Task
from formicarium.pheromones.fields import TraceKind
from formicarium.simulation.snapshot import AntView, MorselView, NestView, TraceView

# Colour palette
_BG = (25, 75, 75)
_NEST = (25, 75, 230)
_MORSEL = (75, 128, 0)
_TEXT = (255, 255, 255)

# Ant colours by task
_ANT_COLOURS: dict[Task, tuple[int, int, int]] = {
    Task.FORAGING: (255, 0, 0),
    Task.CARRYING: (0, 0, 255),
}

# Trace colours (home-bound white, food-bound yellow)
_TRACE_COLOURS: dict[TraceKind, np.ndarray] = {
    TraceKind.HOME_BOUND: np.array([255, 255, 255], dtype=np.float64),
    TraceKind.FOOD_BOUND: np.array([255, 220, 0], dtype=np.float64),
}


class PygameRenderer:
    """Renders a Simulation snapshot into a Pygame window.

    Attributes:
        simulation: The simulation to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets: generations per second at 30 fps
    _SPEED_STEPS: ClassVar[list[float]] = [
        1.0,
        3.0,
        10.0,
        30.0,
        60.0,
        120.0,
        300.0,
        600.0,
        1200.0,
    ]

    def __init__(
        self,
        simulation: Simulation,
        cell_size: int = 25,
        generations_per_second: float = 24.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            simulation: The simulation to render.
            cell_size: Pixel width/height per grid cell.
            generations_per_second: Generations per real-time second.
        """
        self.simulation = simulation
        self.cell_size = cell_size
        self.generations_per_second = generations_per_second
        self._speed_index = self._nearest_speed(generations_per_second)
        self._accumulator = 0.0

        self._win_w = simulation.grid.width * cell_size
        self._win_h = simulation.grid.height * cell_size

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Formicarium!")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _nearest_speed(self, gps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - gps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> int:
        """Main loop: handle events, step the simulation, render.

        The loop ends when the window is closed or the simulation is over.

        Args:
            fps: Target frames per second.

        Returns:
            The generation counter when the window closed.
        """
        self.running = not self.simulation.is_simulation_over()
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if not self.paused:
                self._accumulator += self.generations_per_second * dt
                steps = int(self._accumulator)
                self._accumulator -= steps
                for _ in range(steps):
                    self.simulation.nextgen()
                    if self.simulation.is_simulation_over():
                        self.running = False
                        break
            self._draw()

        pygame.quit()
        return self.simulation.generation

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.generations_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.generations_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame from the entity snapshot."""
        self.screen.fill(_BG)
        overlay = pygame.Surface((self._win_w, self._win_h), pygame.SRCALPHA)
        max_value = self.simulation.config.max_concentration
        cs = self.cell_size

        entities = list(self.simulation.entities())

        # Traces go underneath everything else
        for entity in entities:
            match entity:
                case TraceView(position=(x, y), kind=kind, concentration=value):
                    if value <= self.simulation.config.trace_threshold:
                        continue
                    alpha = int(min(value / max_value, 1.0) * 160)
                    colour = _TRACE_COLOURS[kind].astype(int).tolist()
                    pygame.draw.rect(overlay, (*colour, alpha), (x * cs, y * cs, cs, cs))
        self.screen.blit(overlay, (0, 0))

        for entity in entities:
            match entity:
                case TraceView():
                    pass
                case NestView(position=(x, y)):
                    self._draw_square(_NEST, x, y, 1.1)
                case MorselView(position=(x, y), remaining=remaining):
                    scale = min(remaining / max(self.simulation.config.morsel_food, 1), 1.0)
                    self._draw_square(_MORSEL, x, y, 1.1 * max(scale, 0.2))
                case AntView(position=(x, y), task=task):
                    radius = max(2, int(cs * 0.4))
                    centre = (x * cs + cs // 2, y * cs + cs // 2)
                    pygame.draw.circle(self.screen, _ANT_COLOURS[task], centre, radius)

        self._draw_stats()
        pygame.display.flip()

    def _draw_square(
        self,
        colour: tuple[int, int, int],
        x: int,
        y: int,
        scale: float,
    ) -> None:
        """Draw a square centred on a cell, ``scale`` times the cell size."""
        cs = self.cell_size
        side = int(cs * scale)
        offset = (side - cs) // 2
        pygame.draw.rect(self.screen, colour, (x * cs - offset, y * cs - offset, side, side))

    def _draw_stats(self) -> None:
        """Draw collected food and generation in the top-left corner."""
        sim = self.simulation
        lines = [
            f"Collected: {sim.nest.accumulated}/{sim.total_food}",
            f"Generation: {sim.generation}",
            f"Speed: {self.generations_per_second:.0f} g/s"
            + (" PAUSED" if self.paused else ""),
        ]
        y = 10
        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (10, y))
            y += 18
