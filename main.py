import time
import logging
import signal
import argparse
from typing import List, Optional

from core.app_context import AppContext
from core.config_loader import load_config, MatchingWeights
from database.init_db import init_db
from pipeline.runner import (
    run_matching_pipeline,
    run_status_check,
    run_cover_letter,
    build_insights_report,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False


def parse_weights(raw: Optional[str]) -> Optional[MatchingWeights]:
    """Parse 'skills,experience,location,company' into MatchingWeights."""
    if not raw:
        return None
    parts = [float(p) for p in raw.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("--weights needs four comma-separated numbers")
    skills, experience, location, company = parts
    return MatchingWeights(skills=skills, experience=experience, location=location, company=company)


def cmd_match(ctx: AppContext, args) -> int:
    result = run_matching_pipeline(ctx, args.user, args.posting or None, args.weights)
    if not result.success:
        logger.error(f"Matching failed: {result.error}")
        return 1
    logger.info(
        f"Processed {result.processed_count} posting(s): high={result.high_count}, "
        f"medium={result.medium_count}, low={result.low_count}, "
        f"degraded={result.degraded_count}, failed={len(result.failures)}"
    )
    return 0


def cmd_track(ctx: AppContext, args) -> int:
    result = run_status_check(ctx, args.user)
    if not result.success:
        logger.error(f"Status check failed: {result.error}")
        return 1
    for update in result.updates:
        logger.info(f"  {update.application_id}: {update.old_status} -> {update.new_status} ({update.source})")
    for reminder in result.reminders:
        logger.info(f"  [{reminder.priority}] {reminder.message}")
    return 0


def cmd_insights(ctx: AppContext, args) -> int:
    report = build_insights_report(ctx, args.user)

    matching = report.matching
    logger.info("=== Matching Insights ===")
    logger.info(
        f"Postings: {matching.total_postings}, high matches: {matching.high_match_count}, "
        f"average score: {matching.average_match_score:.2f}"
    )
    for entry in matching.top_companies:
        logger.info(f"  company: {entry['company']} ({entry['count']})")
    for entry in matching.top_locations:
        logger.info(f"  location: {entry['location']} ({entry['count']})")
    for suggestion in matching.suggestions:
        logger.info(f"  - {suggestion}")

    apps = report.applications
    logger.info("=== Application Insights ===")
    logger.info(f"Applications: {apps.total_applications}, by status: {apps.status_counts}")
    logger.info(
        f"Success rate: {apps.success_rate:.1%}, "
        f"average response time: {apps.average_response_time_days:.1f} days"
    )

    health = report.health
    logger.info(
        f"Last 30 days: {health.recent_applications} application(s), "
        f"{health.application_rate:.1f}/week, most active day: {health.most_active_day}"
    )
    for reminder in report.reminders:
        logger.info(f"  [{reminder.priority}] {reminder.message}")
    return 0


def cmd_cover_letter(ctx: AppContext, args) -> int:
    result = run_cover_letter(
        ctx,
        args.user,
        args.posting,
        tone=args.tone,
        length=args.length,
        custom_points=args.point,
        with_variations=args.variations or None,
    )
    if not result.success:
        logger.error(f"Cover letter failed: {result.error}")
        return 1

    print(result.letter.cover_letter)
    for i, variation in enumerate(result.letter.variations, 1):
        print(f"\n--- Variation {i} ---\n{variation}")
    return 0


def run_tracking_loop(ctx: AppContext, user_id: str, interval: int):
    """Re-run status tracking every interval seconds until a shutdown signal."""
    cycle_count = 0
    while running:
        cycle_count += 1
        cycle_start = time.time()
        logger.info(f"=== Starting Cycle #{cycle_count} (TRACK) ===")
        try:
            run_status_check(ctx, user_id, source="loop")
        except Exception as e:
            logger.error(f"Error in main loop: {e}", exc_info=True)

        cycle_elapsed = time.time() - cycle_start
        if running:
            logger.info(f"=== Cycle #{cycle_count} completed in {cycle_elapsed:.2f}s. Sleeping for {interval} seconds... ===")
            # Sleep in chunks to allow responsive shutdown
            for _ in range(max(1, interval // 5)):
                if not running:
                    break
                time.sleep(5)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="InternScout Main Driver")
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    parser.add_argument('--loop', action='store_true',
                        help='With "track": re-run every schedule.interval_seconds until stopped')

    sub = parser.add_subparsers(dest='command', required=True)

    match = sub.add_parser('match', help='Score postings for a user')
    match.add_argument('--user', required=True, help='User id')
    match.add_argument('--posting', action='append', default=[], help='Posting id (repeatable; default all)')
    match.add_argument('--weights', type=parse_weights, help='skills,experience,location,company (must sum to 1.0)')

    track = sub.add_parser('track', help='Reconcile application statuses for a user')
    track.add_argument('--user', required=True, help='User id')

    insights = sub.add_parser('insights', help='Show matching and application insights')
    insights.add_argument('--user', required=True, help='User id')

    letter = sub.add_parser('cover-letter', help='Generate a cover letter')
    letter.add_argument('--user', required=True, help='User id')
    letter.add_argument('--posting', required=True, help='Posting id')
    letter.add_argument('--tone', choices=['professional', 'casual', 'enthusiastic'])
    letter.add_argument('--length', choices=['short', 'medium', 'long'])
    letter.add_argument('--point', action='append', default=[], help='Custom point to include (repeatable)')
    letter.add_argument('--variations', action='store_true', help='Also generate enthusiastic/concise variations')

    return parser


COMMANDS = {
    'match': cmd_match,
    'track': cmd_track,
    'insights': cmd_insights,
    'cover-letter': cmd_cover_letter,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    config = load_config(args.config)

    # Initialize DB (with retry logic)
    init_db(config.database.url)

    ctx = AppContext.build(config)
    try:
        if args.loop:
            if args.command != 'track':
                logger.error("--loop is only supported with the 'track' command")
                return 2
            logger.info(f"Main driver starting in TRACK loop mode for user {args.user}...")
            run_tracking_loop(ctx, args.user, config.schedule.interval_seconds)
            return 0

        return COMMANDS[args.command](ctx, args)
    finally:
        ctx.close()


if __name__ == "__main__":
    raise SystemExit(main())
