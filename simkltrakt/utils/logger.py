"""Logger du projet : console + fichiers journaliers, loggers enfants par module."""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, ParamSpec, Protocol, TypeVar, cast

from simkltrakt.utils.config import LOG_FILE_PATH, LOG_ROTATION_DAYS
from simkltrakt.utils.log_rotation import rotate_logs

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] %(message)s"
GLOBAL_LOG_NAME = "SimklTrakt"

_configured: set[str] = set()


# ---------- Protocole (contrat) ----------
class LoggerProtocol(Protocol):
    """
    Interface minimale attendue par les modules de synchronisation.

    Tout objet exposant ces méthodes (un vrai ``logging.Logger`` enveloppé,
    ou un faux logger dans les tests) peut être passé en ``logger=``.
    """

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def get_child(self, suffix: str) -> LoggerProtocol:
        """
        Retourne un logger enfant nommé ``<parent>.<suffix>``.
        """
        ...


# ---------- Classe concrète (instanciable) ----------


@dataclass(frozen=True)
class SyncLogger:
    """
    Enveloppe immuable autour d'un ``logging.Logger``.

    Les handlers sont portés par le logger de base créé par :func:`get_logger` ;
    les enfants obtenus via :meth:`get_child` propagent vers lui et héritent
    donc de son niveau et de ses fichiers.

    Attributes:
        _base: le logger standard sous-jacent.
    """

    _base: logging.Logger

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None:
        """
        Comme :meth:`error`, avec la trace de l'exception en cours.
        """
        self._base.exception(msg, *args, **kwargs)

    def get_child(self, suffix: str) -> LoggerProtocol:
        """
        Crée un logger enfant.

        Args:
        - suffix (str): suffixe ajouté au nom du logger courant (souvent ``__name__``).

        Returns:
        Un nouveau SyncLogger sans handler propre.
        """
        return SyncLogger(self._base.getChild(suffix))


def _ensure_handlers(base: logging.Logger, log_files: list[str]) -> None:
    if getattr(base, "_simkltrakt_configured", False):
        return

    formatter = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    base.addHandler(stream)

    for log_file in log_files:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        base.addHandler(fh)

    base.propagate = False
    setattr(base, "_simkltrakt_configured", True)


def get_logger(script_name: str) -> LoggerProtocol:
    """
    Constructeur de logger.

    Crée le dossier de logs si besoin, lance la rotation des anciens fichiers puis
    attache les handlers (console, fichier global du jour, fichier du script).
    Avec ``LOG_FILE_PATH`` vide, seule la console est utilisée.

    :param script_name: Nom du script.
    :return: Instanciation de logger.
    """
    log_files: list[str] = []
    if LOG_FILE_PATH:
        os.makedirs(LOG_FILE_PATH, exist_ok=True)
        date_str = datetime.now().strftime("%Y-%m-%d")
        script_log_file = os.path.join(LOG_FILE_PATH, f"{date_str}_{script_name}.log")
        log_files = [os.path.join(LOG_FILE_PATH, f"{date_str}_{GLOBAL_LOG_NAME}.log"), script_log_file]

        try:
            rotate_logs(LOG_FILE_PATH, LOG_ROTATION_DAYS, logf=script_log_file)
        except Exception as exc:  # noqa: BLE001
            base_fallback = logging.getLogger(script_name)
            base_fallback.setLevel(logging.INFO)
            _ensure_handlers(base_fallback, log_files)
            SyncLogger(base_fallback).warning("Rotation des logs échouée: %s", exc)

    base = logging.getLogger(script_name)
    if script_name not in _configured:
        base.setLevel(logging.INFO)
    _ensure_handlers(base, log_files)
    _configured.add(script_name)
    return SyncLogger(base)


def enable_debug() -> None:
    """Passe tous les loggers créés par :func:`get_logger` en DEBUG."""
    for name in _configured:
        logging.getLogger(name).setLevel(logging.DEBUG)


# ---------- Utilities ----------
def ensure_logger(logger: LoggerProtocol | None, module: str) -> LoggerProtocol:
    """
    Retourne un logger utilisable pour ``module``.

    Sans logger fourni, un nouveau logger racine est créé ; sinon on dérive un enfant.
    """
    if logger is None:
        return get_logger(module)
    return logger.get_child(module)


# ---------- Décorateur type-safe ----------
P = ParamSpec("P")
R = TypeVar("R")


def with_child_logger(func: Callable[P, R]) -> Callable[P, R]:
    """
    Injecte dans ``kwargs["logger"]`` un logger enfant nommé d'après le module décoré.

    :param func: La fonction à décorer
    :return: La fonction décorée
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        current = cast(Optional[LoggerProtocol], kwargs.get("logger"))
        kwargs["logger"] = ensure_logger(current, func.__module__)
        return func(*args, **kwargs)

    return wrapper
