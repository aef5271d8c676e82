import logging
import sys
from typing import Optional

from .config import GazetteConfig
from .errors import GazetteError

logger = logging.getLogger("gazette")


def configure_logging(config: GazetteConfig) -> None:
    """Send logs to ``config.log_file`` if one is set.

    The terminal belongs to the UI, so nothing is logged to the console.
    Handlers from an earlier call are replaced rather than stacked.
    """
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    if not config.log_file:
        logger.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(config.log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.WARNING))


def _report(message: str) -> None:
    # one line, no traceback
    sys.stderr.write(f"gazette: {' '.join(message.split())}\n")
    sys.stderr.flush()


def main(config: Optional[GazetteConfig] = None) -> int:
    """Start the interface. 0 on a normal quit, 1 on a fatal error."""
    try:
        config = config or GazetteConfig.load()
        configure_logging(config)
        from .tui.app import run_tui
        return run_tui(config)
    except GazetteError as exc:
        _report(str(exc))
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        logger.exception("unexpected error")
        _report(f"unexpected error: {exc}")
        return 1


# Top-level guard for proper exit code and output handling
if __name__ == "__main__":
    sys.exit(main())
