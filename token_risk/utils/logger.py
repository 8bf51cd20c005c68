import sys

from loguru import logger

CLI_FORMAT = "<level>{level: <8}</level> | <level>{message}</level>"
SERVER_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(
    *,
    json_logs: bool = False,
    level: str = "INFO",
    log_file: str = "",
    server: bool = False,
) -> None:
    """Configure loguru for the analyzer.

    Logs always go to stderr so ``analyze --json`` keeps stdout clean. The
    one-shot CLI gets a compact format; ``serve`` adds timestamps and
    module names. A rotating DEBUG file sink is added only when
    ``log_file`` is set.
    """
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=level.upper())
    else:
        logger.add(
            sys.stderr,
            format=SERVER_FORMAT if server else CLI_FORMAT,
            level=level.upper(),
            colorize=True,
        )

    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            retention=5,
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
