from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

import requests

from simkltrakt.auth.credentials import CredentialPersister, Credentials, CredentialStore, EnvCredentialStore
from simkltrakt.auth.device_flow import run_setup
from simkltrakt.simkl.simkl_client import SimklClient
from simkltrakt.sync.history_log import record
from simkltrakt.sync.models import SyncOutcome
from simkltrakt.sync.normalize import normalize
from simkltrakt.sync.submitter import submit
from simkltrakt.trakt.trakt_client import TraktClient
from simkltrakt.utils.config import CONFIG_FILE, SYNC_HISTORY_FILE
from simkltrakt.utils.errors import ConfigMissing, SyncError
from simkltrakt.utils.logger import LoggerProtocol, enable_debug, ensure_logger, get_logger
from simkltrakt.utils.safe_runner import safe_main

logger = get_logger("Simkl_Trakt_Sync")


def run_sync(
    credentials: Credentials,
    store: CredentialPersister,
    history_file: Path | None = SYNC_HISTORY_FILE,
    simkl: SimklClient | None = None,
    trakt: TraktClient | None = None,
    logger: LoggerProtocol | None = None,
) -> SyncOutcome:
    """
    Un run complet : Simkl → conversion → test Trakt → envoi → historique.

    Toute erreur fatale (``SyncError``, erreur réseau, réponse illisible) est inscrite
    dans l'historique (si ``history_file``) puis relancée.
    Un run sans rien à envoyer n'écrit rien dans l'historique.
    """
    logger = ensure_logger(logger, __name__)
    simkl = simkl or SimklClient(credentials, logger=logger)
    trakt = trakt or TraktClient(credentials, store, logger=logger)

    try:
        snapshot = simkl.fetch_watched()
        payload = normalize(snapshot)
        logger.info("📊 %d films et %d séries à synchroniser", len(payload["movies"]), len(payload["shows"]))
        trakt.test_connection()
        outcome = submit(payload, trakt, logger=logger)
    except (SyncError, requests.RequestException, ValueError) as exc:
        if history_file is not None:
            record(SyncOutcome.failed(str(exc) or type(exc).__name__), history_file, logger=logger)
        raise

    if outcome.status == "success" and history_file is not None:
        record(outcome, history_file, logger=logger)
    return outcome


def sync_command(args: argparse.Namespace) -> SyncOutcome:
    history_file: Path | None = None if args.no_history else Path(args.history_file)
    logger.info("🚀 Démarrage de la synchro - %s", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    store: CredentialStore | EnvCredentialStore
    store = EnvCredentialStore(logger=logger) if args.from_env else CredentialStore(args.config, logger=logger)
    try:
        credentials = store.load()
    except ConfigMissing as exc:
        if history_file is not None:
            record(SyncOutcome.failed(str(exc)), history_file, logger=logger)
        raise

    return run_sync(credentials, store, history_file=history_file, logger=logger)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simkltrakt", description="Synchroniser l'historique Simkl vers Trakt")
    parser.add_argument("--config", default=str(CONFIG_FILE), help="Fichier JSON des identifiants")
    parser.add_argument("--debug", action="store_true", help="Logs détaillés")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("setup", help="Autoriser Simkl et Trakt (PIN / device flow)")

    sync = commands.add_parser("sync", help="Envoyer tout l'historique Simkl vers Trakt")
    sync.add_argument("--from-env", action="store_true", help="Identifiants depuis l'environnement (CI)")
    sync.add_argument("--history-file", default=str(SYNC_HISTORY_FILE), help="Journal JSON des runs")
    sync.add_argument("--no-history", action="store_true", help="Ne pas écrire le journal des runs")
    return parser


@safe_main
def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if args.debug:
        enable_debug()

    if args.command == "setup":
        run_setup(CredentialStore(args.config, logger=logger), logger=logger)
        return

    sync_command(args)


if __name__ == "__main__":
    main()
