#!/usr/bin/env python3
"""
mentionvault - participant mentions across a vault

Main entry point for mentionvault. Wires the configuration, document store,
database and engines together and exposes them as subcommands.
"""

import logging
import sys
import argparse
from typing import List, Optional

from mentionvault.config import ConfigManager
from mentionvault.database import DatabaseManager
from mentionvault.engine import build_identity_table, find_documents, rewrite, scan, sort_by_recency
from mentionvault.errors import MentionVaultError
from mentionvault.models import MentionForm, RewriteReport, RewriteTransition
from mentionvault.participants import ParticipantManager
from mentionvault.stores import BaseDocumentStore, InMemoryDocumentStore, MarkdownVaultStore
from mentionvault.versioning import VersionManager


def setup_logging(config: ConfigManager):
    """Configure logging for the application."""
    level = getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO)
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_filename:
        handlers.append(logging.FileHandler(config.log_filename))

    # ConfigManager may already have logged, which installs a default handler
    logging.basicConfig(level=level, format=format_str, handlers=handlers, force=True)


def create_store(args, config: ConfigManager) -> BaseDocumentStore:
    """
    Build the document store selected on the command line.

    Args:
        args: Parsed arguments (uses --store and --vault)
        config: Configuration supplying vault defaults
    """
    if args.store == "mock":
        return InMemoryDocumentStore.with_sample_documents()
    return MarkdownVaultStore(
        args.vault or config.vault_path,
        extension=config.document_extension,
        exclude_dirs=config.exclude_dirs,
    )


def database_path(args, config: ConfigManager) -> str:
    # Mock runs never touch the real participant database
    if args.store == "mock":
        return ":memory:"
    return config.database_filename


def print_report(report: RewriteReport):
    """Print a rewrite report as a short per-document summary."""
    for entry in report.documents:
        if entry.occurrences or entry.error:
            suffix = f" ({entry.error})" if entry.error else ""
            print(f"{entry.outcome.value:>14}  {entry.occurrences:>3}  {entry.document_id}{suffix}")
    total = report.total_count
    print(f"Updated {total} mention{'s' if total != 1 else ''} in vault")
    if report.cancelled:
        print("Rewrite was cancelled before every document was visited.")


def commit_reports(reports: List[RewriteReport], args, config: ConfigManager):
    """Commit rewritten documents to the vault repository when enabled."""
    if not config.auto_commit or args.store == "mock":
        return
    version_manager = VersionManager(
        args.vault or config.vault_path,
        author_name=config.get("git.author_name", "mentionvault"),
        author_email=config.get("git.author_email", "mentionvault@localhost"),
    )
    if not version_manager.initialize_repository():
        return
    for report in reports:
        version_manager.create_rewrite_commit(report)


def run_scan(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """Print every mention in the vault and the identity table it implies."""
    result = scan(store)

    for document_id, occurrences in result.occurrences.items():
        if not occurrences:
            continue
        print(document_id)
        for occurrence in occurrences:
            print(f"  {occurrence.start_offset:>6}  {occurrence.encoding.value:<8}  "
                  f"{occurrence.participant_id} ({occurrence.display_name})")

    for document_id, error in result.errors.items():
        print(f"skipped {document_id}: {error}")

    table = build_identity_table(result, manager.list_participants())
    print(f"\n{len(table)} participant(s):")
    for participant_id, name in table.items():
        print(f"  {participant_id}: {name}")
    return 0


def run_generate(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """Seed the participant list from the vault."""
    before = len(manager.list_participants())
    table = manager.generate_from_vault()
    print(f"Participants generated from vault: {len(table) - before} new, {len(table)} total")
    for participant_id, reason in table.skipped.items():
        print(f"  skipped {participant_id}: {reason}")
    return 0


def run_rewrite(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """Rewrite mentions for an explicit transition."""
    transition = RewriteTransition(
        old_id=args.old_id,
        new_id=args.new_id or args.old_id,
        new_name=args.new_name,
    )
    # Explicit rewrites ignore mentions.auto_update
    reports = [rewrite(store, transition)]
    print_report(reports[0])
    commit_reports(reports, args, config)
    return 1 if reports[0].failed_documents else 0


def run_query(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """List documents mentioning the given participants, newest first."""
    participant_ids = manager.resolve_identifiers(args.participant_ids)
    documents = sort_by_recency(store, find_documents(store, participant_ids))

    print(f"Search Results: {', '.join(participant_ids)}")
    if not documents:
        print("No files found.")
        return 0
    for document_id in documents:
        print(f"  {document_id}")
    print(f"Found {len(documents)} file(s)")
    return 0


def run_participants(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """Manage the curated participant list."""
    reports: List[RewriteReport] = []

    if args.action == "list":
        participants = manager.list_participants()
        if not participants:
            print("No participants added yet.")
        active_id = manager.active_identifier()
        for participant in participants:
            marker = "*" if participant.id == active_id else " "
            print(f"{marker} {participant.id}: {participant.name}")
        return 0

    if args.action == "add":
        participant = manager.add_participant(args.participant_id, args.name)
        print(f"Added participant {participant.name} ({participant.id})")
    elif args.action == "update":
        reports = manager.update_participant(args.participant_id, new_id=args.new_id, new_name=args.new_name)
        for report in reports:
            print_report(report)
    elif args.action == "delete":
        removed = manager.delete_participant(args.participant_id)
        print(f"Deleted participant {removed.name} ({removed.id})")

    commit_reports(reports, args, config)
    return 0


def run_active(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """Show, set or clear the active participant."""
    if args.action == "set":
        participant = manager.set_active(args.participant_id)
        print(f"Active user set to: {participant.name}")
    elif args.action == "clear":
        manager.clear_active()
        print("Active user cleared")
    else:
        participant = manager.active_participant()
        if participant is None:
            print("No active user. Set one with: active set <participant-id>")
        else:
            print(f"Active user: {participant.name} ({participant.id})")
    return 0


def run_suggest(args, config: ConfigManager, store: BaseDocumentStore, manager: ParticipantManager) -> int:
    """Show autocomplete candidates and the markup each would insert."""
    form = MentionForm(args.form) if args.form else None
    for suggestion in manager.suggest(args.query):
        if suggestion.is_new:
            print(f"{suggestion.name} (create new participant)")
        else:
            print(f"{suggestion.name} ({suggestion.id})  {manager.mention_text(suggestion.id, form)}")
    return 0


COMMANDS = {
    "scan": run_scan,
    "generate": run_generate,
    "rewrite": run_rewrite,
    "query": run_query,
    "participants": run_participants,
    "active": run_active,
    "suggest": run_suggest,
}


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="mentionvault - participant mentions across a vault",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --store mock scan                          # Scan the built-in sample vault
  python main.py --vault ~/notes generate                   # Seed participants from a vault
  python main.py --vault ~/notes rewrite john Johnny --new-id johnny
  python main.py --vault ~/notes query me jane              # Documents mentioning me or jane
  python main.py participants update john --new-name "John D."
        """
    )

    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--store",
        choices=["markdown", "mock"],
        default="markdown",
        help="Document store to use (default: markdown)"
    )

    parser.add_argument(
        "--vault",
        type=str,
        help="Vault directory (default: vault.path from the configuration)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="mentionvault 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("scan", help="List every mention and the identity table")
    subparsers.add_parser("generate", help="Add participants found in the vault")

    rewrite_parser = subparsers.add_parser("rewrite", help="Rewrite mentions of a participant id")
    rewrite_parser.add_argument("old_id", help="Participant id currently used in mentions")
    rewrite_parser.add_argument("new_name", help="Display name to write into each mention")
    rewrite_parser.add_argument("--new-id", help="New participant id (default: unchanged)")

    query_parser = subparsers.add_parser("query", help="Find documents mentioning participants")
    query_parser.add_argument("participant_ids", nargs="+", help="Participant ids ('me' for the active user)")

    participants_parser = subparsers.add_parser("participants", help="Manage participants")
    participant_actions = participants_parser.add_subparsers(dest="action", required=True)
    participant_actions.add_parser("list", help="List participants")
    add_parser = participant_actions.add_parser("add", help="Add a participant")
    add_parser.add_argument("participant_id")
    add_parser.add_argument("name")
    update_parser = participant_actions.add_parser("update", help="Change a participant's id or name")
    update_parser.add_argument("participant_id")
    update_parser.add_argument("--new-id")
    update_parser.add_argument("--new-name")
    delete_parser = participant_actions.add_parser("delete", help="Delete a participant")
    delete_parser.add_argument("participant_id")

    active_parser = subparsers.add_parser("active", help="Show or change the active user")
    active_actions = active_parser.add_subparsers(dest="action")
    active_actions.add_parser("show", help="Show the active user")
    set_parser = active_actions.add_parser("set", help="Set the active user")
    set_parser.add_argument("participant_id")
    active_actions.add_parser("clear", help="Clear the active user")

    suggest_parser = subparsers.add_parser("suggest", help="Autocomplete a mention")
    suggest_parser.add_argument("query")
    suggest_parser.add_argument("--form", choices=[form.value for form in MentionForm])

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    config = ConfigManager(args.config)
    setup_logging(config)

    try:
        store = create_store(args, config)
        with DatabaseManager(database_path(args, config)) as db:
            db.initialize_database()
            manager = ParticipantManager(db, store, config)
            return COMMANDS[args.command](args, config, store, manager)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print("\nInterrupted.")
        return 130

    except (MentionVaultError, FileNotFoundError) as e:
        logging.error(f"{args.command} failed: {e}")
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
