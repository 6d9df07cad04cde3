# -*- coding: utf-8 -*-
"""Fetch a public profile and write its .vcf to disk."""
from __future__ import annotations
import argparse
import sys
from pathlib import Path

import requests

from profilecard.api import FOUND, ProfileClient
from profilecard.config import Settings
from profilecard.dispatch import ContactDispatcher, DirectorySaver
from profilecard.mailer import EmailSender
from profilecard.photo import PhotoInliner
from profilecard.utils import setup_logging
from profilecard.validation import EmailValidator

# Representative User-Agents so the same dialect selection applies offline.
USER_AGENTS = {
    "ios": "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148",
    "android": "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 Chrome/120.0 Mobile Safari/537.36",
    "other": "",
}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("handle")
    parser.add_argument("--platform", choices=sorted(USER_AGENTS), default="ios")
    parser.add_argument("--out", type=Path, default=Path("."))
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    setup_logging(settings.logs_dir)
    http = requests.Session()

    lookup = ProfileClient(settings.api_base_url, http, timeout=settings.http_timeout).fetch(args.handle)
    if lookup.status != FOUND:
        print(f"{args.handle}: {lookup.message}", file=sys.stderr)
        return 1

    saver = DirectorySaver(args.out)
    dispatcher = ContactDispatcher(
        inliner=PhotoInliner(http, timeout=settings.http_timeout),
        validator=EmailValidator(settings.email_validation_key, http, timeout=settings.http_timeout),
        sender=EmailSender(settings.email_send_url, http, timeout=settings.http_timeout),
        saver=saver,
    )
    document = dispatcher.save_contact(lookup.profile, USER_AGENTS[args.platform])
    print(f"Written: {saver.last_path} ({document.dialect})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
