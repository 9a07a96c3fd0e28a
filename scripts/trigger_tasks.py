"""CLI script to run background diary jobs by hand."""
from __future__ import annotations

import argparse

from app.tasks.achievements import check_all_achievements, check_user_achievements
from app.tasks.notifications import send_event_reminders


def main() -> None:
    parser = argparse.ArgumentParser(description="Manually trigger diary background jobs")
    parser.add_argument("--user-id", type=str, help="Check achievements for one user")
    parser.add_argument("--all", action="store_true", help="Check achievements for all active users")
    parser.add_argument("--reminders", action="store_true", help="Send due event reminders")
    parser.add_argument(
        "--async",
        action="store_true",
        dest="use_async",
        help="Queue the task instead of running it in-process",
    )
    args = parser.parse_args()

    if args.reminders:
        task, task_args = send_event_reminders, ()
    elif args.all:
        task, task_args = check_all_achievements, ()
    elif args.user_id:
        task, task_args = check_user_achievements, (args.user_id,)
    else:
        parser.error("Specify --user-id, --all or --reminders")

    print(f"Running {task.name}...")
    if args.use_async:
        queued = task.apply_async(args=task_args)
        print(f"Task queued: {queued.id}")
    else:
        print(f"Result: {task.run(*task_args)}")


if __name__ == "__main__":
    main()
