# repo_dashboard/main.py
"""
Command-line entry point for the repository dashboard backend.

Each command:
1. Loads configuration from the environment
2. Builds the dashboard service
3. Runs one query against GitHub
4. Prints the result as JSON on stdout
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from repo_dashboard.adapters.errors import ConfigurationError, GitHubAPIError
from repo_dashboard.config.settings import GitHubConfig
from repo_dashboard.services.dashboard import GitHubDashboardService

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='repo-dashboard',
        description='Aggregate issues, pull requests and branches across GitHub repositories'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True, help='Command to run')

    repos_parser = subparsers.add_parser('repos', help='List the repositories of an organization')
    repos_parser.add_argument('org', help='Organization login')

    for command, help_text in (
        ('issues', 'List issues of a repository'),
        ('pulls', 'List pull requests of a repository'),
        ('branches', 'List branches of a repository'),
    ):
        item_parser = subparsers.add_parser(command, help=help_text)
        item_parser.add_argument('owner', help='Repository owner')
        item_parser.add_argument('repo', help='Repository name')

    subparsers.add_parser('health', help='Show service status and GitHub rate limit')
    return parser


def run_command(service: GitHubDashboardService, args: argparse.Namespace) -> Dict[str, Any]:
    """Run one parsed command against the service and return the JSON document."""
    if args.command == 'repos':
        repositories = service.get_organization_repos(args.org)
        return {'repositories': [repo.to_dict() for repo in repositories]}

    if args.command == 'health':
        return {
            'status': 'ok',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'rateLimit': service.get_rate_limit_info().to_dict()
        }

    fetchers = {
        'issues': service.get_repository_issues,
        'pulls': service.get_repository_pulls,
        'branches': service.get_repository_branches,
    }
    items = fetchers[args.command](args.owner, args.repo)
    return {'items': [item.to_dict() for item in items]}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the dashboard CLI.

    Returns:
        Exit code (0 for success, 1 for error, 130 if interrupted)
    """
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    try:
        config = GitHubConfig.from_env()
        service = GitHubDashboardService(config)
    except (ConfigurationError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        document = run_command(service, args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except GitHubAPIError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.exception(f"Command {args.command} failed with error: {e}")
        return 1
    finally:
        service.close()

    json.dump(document, sys.stdout, indent=2)
    sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
