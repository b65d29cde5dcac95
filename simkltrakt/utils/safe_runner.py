from __future__ import annotations

import functools
import sys
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from simkltrakt.utils.errors import SyncError
from simkltrakt.utils.logger import get_logger

P = ParamSpec("P")
R = TypeVar("R")

logger = get_logger("safe_runner")


def safe_main(func: Callable[P, R]) -> Callable[P, R]:
    """
    Point d'entrée de script : toute erreur non rattrapée termine le process en code 1.

    - ``SyncError`` : message d'erreur court, sans trace.
    - autre exception : trace complète.
    - ``KeyboardInterrupt`` : code 130.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            logger.warning("⛔ Interrompu par l'utilisateur")
            sys.exit(130)
        except SyncError as exc:
            logger.error("❌ %s", exc)
            sys.exit(1)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("💥 Erreur inattendue dans %s: %s", func.__name__, exc)
            sys.exit(1)

    return wrapper
