"""Main CLI entry point for ephemeral-runner.

Maps the outcome of a provisioning run to the process exit code.
"""

import asyncio
import sys
from collections.abc import Sequence

from ephemeral_runner.cli import CLIRunner
from ephemeral_runner.constants import EXIT_FAILURE, EXIT_SUCCESS
from ephemeral_runner.exceptions import ProvisioningError
from ephemeral_runner.logger import flush_all_handlers, get_logger

logger = get_logger(__name__)


async def async_main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI asynchronously."""
    logger.debug("CLI started")
    runner = CLIRunner(argv)
    await runner.run()
    logger.debug("CLI completed successfully")


def main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI application and exit with its status.

    Exit codes:
        0: success
        1: any failure except a missing runner service
        2: the runner service was not registered

    """
    exit_code = EXIT_SUCCESS
    try:
        asyncio.run(async_main(argv))
    except ProvisioningError as e:
        logger.error(
            "❌ %s at step %s: %s", e.kind, e.step or "startup", e.message
        )
        exit_code = e.exit_code
    except KeyboardInterrupt:
        logger.info("\n⏹️  Provisioning cancelled by user")
        exit_code = EXIT_FAILURE
    except Exception:
        logger.exception("❌ Unexpected error")
        exit_code = EXIT_FAILURE
    finally:
        flush_all_handlers()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
