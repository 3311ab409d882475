#!/usr/bin/env python3
"""Headless entry point: restore the session, load data, optionally sign in or out."""

from __future__ import annotations

import argparse
import sys
import traceback

from loguru import logger

from controllers.app_controller import AppController
from utils.constants import CONFIG_FILE, LOGS_DIR, ensure_base_dirs
from utils.logging_config import configure_logging
from utils.service_config import load_service_config


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Restore the photo cards session and print the current profile and cards."
    )
    parser.add_argument("--email", type=str, default=None, help="Sign in with this e-mail.")
    parser.add_argument(
        "--password", type=str, default=None, help="Password used together with --email."
    )
    parser.add_argument(
        "--sign-out",
        action="store_true",
        help="Forget the stored session token before exiting.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="How many cards to list in the summary.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for background requests before giving up.",
    )
    return parser.parse_args(argv)


def _print_summary(controller: AppController, limit: int) -> None:
    session = controller.session
    print(f"Route: {controller.current_route}")
    print(f"Signed in: {'yes (' + session.email + ')' if session.is_logged_in else 'no'}")

    snapshot = controller.entity_store.snapshot()
    profile, cards = snapshot.profile, snapshot.cards
    if profile.is_loaded:
        print(f"Profile: {profile.name} ({profile.about})")
    else:
        print("Profile: not loaded")

    print(f"Cards: {len(cards)}")
    for card in cards[:limit]:
        marker = "♥" if card.is_liked_by(profile.id) else "♡"
        print(f"  {marker} {card.like_count:>3}  {card.name}")
    remaining = max(0, len(cards) - limit)
    if remaining:
        print(f"  …and {remaining} more")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if bool(args.email) != bool(args.password):
        print("--email and --password must be given together", file=sys.stderr)
        return 2

    ensure_base_dirs()
    configure_logging(LOGS_DIR)

    def global_exception_handler(exc_type, exc_value, exc_traceback):
        logger.error("=== UNCAUGHT EXCEPTION (GLOBAL) ===")
        logger.error(f"Exception type: {exc_type.__name__}")
        logger.error(f"Exception value: {exc_value}")
        for line in traceback.format_tb(exc_traceback):
            logger.error(line.rstrip())
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    sys.excepthook = global_exception_handler

    controller = AppController.from_config(load_service_config(CONFIG_FILE))
    logger.info("Starting photo cards client")
    controller.start()
    controller.worker.wait(timeout=args.timeout)

    if args.email:
        controller.on_login(args.email, args.password)
        controller.worker.wait(timeout=args.timeout)
        if not controller.session.is_logged_in:
            print("Sign-in failed.", file=sys.stderr)

    if args.sign_out:
        controller.on_sign_out()

    _print_summary(controller, max(0, args.limit))
    controller.shutdown(timeout=args.timeout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
