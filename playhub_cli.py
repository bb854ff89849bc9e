#!/usr/bin/env python3
"""
PlayHub CLI - browse the sample catalog and bake the static site from a terminal.
"""

import argparse
import sys
from typing import Dict, List

from colorama import init, Fore, Style

from playhub.config import load_config
from playhub.errors import PlayHubError
from playhub.logs import setup_logging
from playhub.seed import load_sample_data
from playhub.services import CatalogService, LeaderboardService
from playhub.static_site import export_static_site
from playhub.store import CatalogStore

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)


def print_games(title: str, games: List[Dict]) -> None:
    print(f"{Fore.CYAN}{Style.BRIGHT}{title} ({len(games)})")
    if not games:
        print(f"{Fore.YELLOW}  No games found.")
        return
    for game in games:
        tags = game['category']
        if game.get('secondaryCategory'):
            tags += f"/{game['secondaryCategory']}"
        badges = ''
        if game.get('isFeatured'):
            badges += f" {Fore.MAGENTA}[featured]"
        if game.get('isNew'):
            badges += f" {Fore.GREEN}[new]"
        print(f"  {Fore.WHITE}#{game['id']:<3} {Style.BRIGHT}{game['title']}{Style.RESET_ALL}"
              f" {Fore.BLUE}{tags}{Style.RESET_ALL}  "
              f"{'★' * (game.get('rating') or 0):<5}  {game.get('playCount') or 0:>6} plays{badges}")


def print_leaderboard(rows: List[Dict]) -> None:
    print(f"{Fore.CYAN}{Style.BRIGHT}Leaderboard")
    for row in rows:
        colour = Fore.YELLOW if row['rank'] == 1 else Fore.WHITE
        print(f"  {colour}{row['rank']:>2}. {row['username']:<16} "
              f"level {row['level']:<3} {row['points']:>7,} points")


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='PlayHub - casual games catalog tools',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 playhub_cli.py --popular 5            # Five most played games
  python3 playhub_cli.py --category puzzle      # Puzzle games (either tag)
  python3 playhub_cli.py --search block         # Title/description search
  python3 playhub_cli.py --leaderboard 10       # Top ten players
  python3 playhub_cli.py --export public/data   # Bake the static site
        """
    )
    parser.add_argument('--config', '-c', default=None, help='Path to JSON config file')
    parser.add_argument('--popular', type=int, metavar='N', help='List the N most played games')
    parser.add_argument('--category', type=str, help='List games in a category')
    parser.add_argument('--search', type=str, help='List games whose title/description match')
    parser.add_argument('--featured', action='store_true', help='List featured games')
    parser.add_argument('--leaderboard', type=int, metavar='N', help='Show the top N players')
    parser.add_argument('--sort', choices=['points', 'level', 'username'], default='points',
                        help='Leaderboard sort key (default: points)')
    parser.add_argument('--export', type=str, metavar='DIR',
                        help='Write games.json, leaderboard.json and comments/ to DIR')
    parser.add_argument('--log-level', default=None, help='Log level (default: WARNING)')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(args.log_level or 'WARNING')

    store = load_sample_data(CatalogStore())
    catalog = CatalogService(store)
    did_something = False

    try:
        if args.export:
            counts = export_static_site(store, args.export,
                                        leaderboard_limit=config['leaderboard_limit'])
            print(f"{Fore.GREEN}Exported {counts['games']} games, {counts['leaderboard']} "
                  f"leaderboard rows and {counts['comment_files']} comment files to {args.export}")
            did_something = True
        if args.popular is not None:
            print_games('Popular games', catalog.get_popular_games(args.popular))
            did_something = True
        if args.featured:
            print_games('Featured games', catalog.get_featured_games())
            did_something = True
        if args.category or args.search:
            title = 'Games'
            if args.category:
                title += f" in '{args.category}'"
            if args.search:
                title += f" matching '{args.search}'"
            print_games(title, catalog.browse(category=args.category, search=args.search))
            did_something = True
        if args.leaderboard is not None:
            print_leaderboard(LeaderboardService(store).get_rankings(
                args.sort, descending=(args.sort != 'username'), limit=args.leaderboard))
            did_something = True
    except PlayHubError as exc:
        print(f"{Fore.RED}Error: {exc}")
        return 1
    except OSError as exc:
        print(f"{Fore.RED}Could not write export: {exc}")
        return 1

    if not did_something:
        print_games('All games', catalog.get_games())
    return 0


if __name__ == "__main__":
    sys.exit(main())
