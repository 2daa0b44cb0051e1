"""Stream parser turning RuboCop stdout into a RubocopResult."""

import logging
from collections.abc import Callable
from typing import TextIO

from rubocheck.inspection.process import RunningProcess
from rubocheck.inspection.result import RubocopResult

logger = logging.getLogger(__name__)

Decoder = Callable[[TextIO], RubocopResult]


class StreamParser:
    """Decodes stdout while the process runs, logging both streams on failure."""

    def __init__(self, decoder: Decoder = RubocopResult.read_from) -> None:
        self.decoder = decoder

    def parse(self, process: RunningProcess) -> RubocopResult | None:
        """Decode the process's stdout.

        On failure the captured stderr is logged under ``ERROR``, stdout is
        replayed from its first byte under ``OUTPUT``, and both streams are closed.

        Args:
            process: Running process with stderr draining

        Returns:
            RubocopResult or None if decoding failed
        """
        try:
            return self.decoder(process.stdout_reader)
        except Exception as e:
            # stdout first: the child cannot reach stderr EOF while blocked on a full stdout pipe
            output = process.stdout_text()
            error = process.stderr_text()
            logger.error("Failed to parse RuboCop output.", exc_info=e)
            logger.error("ERROR:\n%s", error)
            logger.error("OUTPUT:\n%s", output)
            process.close_streams()
            return None
