"""Loading of the fragment shaders listed in the data directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

_DESKTOP_VERSION = "#version 330 core"
_GLES_HEADER = "#version 300 es\nprecision highp float;\n"


def to_gles(text: str) -> str:
    """Replace the first desktop version line with the GLES header."""
    return text.replace(_DESKTOP_VERSION, _GLES_HEADER, 1)


class Shader:
    """A fragment shader read from a file."""

    def __init__(self, filename: Union[str, Path], gles: bool = False) -> None:
        self.filename = str(filename)
        self.gles = gles
        self.fragment_text = ""
        self.opened = False
        self.load_shader(filename)

    def load_shader(self, filename: Union[str, Path]) -> None:
        """Read the shader text; on failure log it and leave opened False."""
        try:
            with open(filename, encoding="utf-8") as handle:
                text = handle.read()
        except OSError:
            logger.error("Error opening: %s", filename)
            return
        if self.gles:
            text = to_gles(text)
        self.fragment_text = text
        if not text:
            logger.error("Could not load shader: %s", filename)
            return
        logger.info("Loaded: %s", filename)
        self.opened = True


class Library:
    """The shaders named in gfx/index.txt under a data directory."""

    def __init__(self, directory: Union[str, Path], gles: bool = False) -> None:
        self.gles = gles
        self.shaders: List[Shader] = []
        self.load_library(directory)

    def load_library(self, directory: Union[str, Path]) -> None:
        """Load every shader listed in the index that can be opened."""
        gfx = Path(directory) / "gfx"
        try:
            with open(gfx / "index.txt", encoding="utf-8", newline="\n") as handle:
                lines = handle.read().split("\n")
        except OSError:
            logger.error("Error opening file index.txt")
            lines = []
        if lines and lines[-1] == "":
            lines.pop()
        for line in lines:
            name = line.split("\r", 1)[0]
            shader = Shader(gfx / name, self.gles)
            if shader.opened:
                self.shaders.append(shader)
        logger.info("Loaded: %d shaders", len(self.shaders))

    def get_shader(self, index: int) -> Shader:
        """Return the shader at index; raise IndexError when out of range."""
        if not 0 <= index < len(self.shaders):
            raise IndexError(f"shader index out of range: {index}")
        return self.shaders[index]

    def __len__(self) -> int:
        return len(self.shaders)