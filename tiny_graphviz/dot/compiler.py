"""Write DOT files and compile them with the Graphviz ``dot`` tool."""

import logging
import subprocess
from pathlib import Path

from ..errors import RenderError, UnsupportedFormatError

LOG = logging.getLogger("tiny_graphviz.dot.compiler")

DOT_EXTENSION = "dot"
DEFAULT_FORMAT = "pdf"
SUPPORTED_FORMATS = ("pdf", "png", "jpg", "gif", "svg", "ps")


class DotCompiler:
    """Persist DOT text and turn it into an image."""

    def __init__(self, output_dir: str | Path = ".", dot_command: str = "dot"):
        """Initialize the compiler.

        Args:
            output_dir: Directory that receives ``.dot`` and image files
            dot_command: Graphviz executable to run
        """
        self.output_dir = Path(output_dir)
        self.dot_command = dot_command

    def path_for(self, base_name: str, extension: str) -> Path:
        """Return ``<output_dir>/<base_name>.<extension>``."""
        return self.output_dir / f"{base_name}.{extension}"

    def save(self, text: str, base_name: str = "G") -> Path:
        """Write DOT text to ``<base_name>.dot``.

        Args:
            text: DOT source
            base_name: File name without extension

        Returns:
            Path of the written file
        """
        path = self.path_for(base_name, DOT_EXTENSION)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

        LOG.info("Wrote %s", path)
        return path

    def compile(self, text: str, base_name: str = "G", fmt: str = DEFAULT_FORMAT) -> Path:
        """Save DOT text and render it with Graphviz.

        Args:
            text: DOT source
            base_name: File name without extension, shared by both outputs
            fmt: Output format, one of SUPPORTED_FORMATS

        Returns:
            Path of the rendered image

        Raises:
            UnsupportedFormatError: If ``fmt`` is not supported
            RenderError: If the dot tool is missing or exits with an error
        """
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(
                f"Unsupported format {fmt!r}; expected one of {', '.join(SUPPORTED_FORMATS)}"
            )

        dot_path = self.save(text, base_name)
        output_path = self.path_for(base_name, fmt)
        args = [self.dot_command, f"-T{fmt}", str(dot_path), "-o", str(output_path)]

        try:
            proc = subprocess.run(args, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise RenderError(f"Graphviz executable not found: {self.dot_command}") from e

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise RenderError(
                f"{self.dot_command} exited with status {proc.returncode}: {stderr}",
                returncode=proc.returncode,
                stderr=stderr,
            )

        LOG.info("Compiled %s -> %s", dot_path, output_path)
        return output_path
