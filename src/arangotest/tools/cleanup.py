"""
Test Data Cleanup Job
Removes databases and users left behind by interrupted test runs
"""

import argparse
import sys
import time
from typing import Any, Dict, List, Optional

from ..config import TestConfig, configure_logging, get_config
from ..core.client import ArangoTestClient, build_client
from ..utils.error_handling import describe, is_not_found

PROTECTED_USERS = ("root",)


class TestDataCleanupJob:
    """Deletes databases and users whose names carry the test data prefix"""

    __test__ = False

    def __init__(self, client: ArangoTestClient, prefix: str, dry_run: bool = False):
        self.client = client
        self.prefix = prefix
        self.dry_run = dry_run
        self.cleanup_stats = {
            "databases_deleted": 0,
            "users_deleted": 0,
            "errors": [],
        }

    def _matches(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def cleanup_databases(self) -> List[str]:
        sys_db = self.client.system_db
        names = [name for name in sys_db.databases() if name != "_system" and self._matches(name)]
        print(f"   🧹 Databases matching '{self.prefix}': {len(names)}")

        for name in names:
            if self.dry_run:
                print(f"      🔍 Would delete database {name} (DRY RUN)")
                continue
            try:
                sys_db.delete_database(name)
                self.cleanup_stats["databases_deleted"] += 1
                print(f"      ✅ Deleted database {name}")
            except Exception as e:
                if is_not_found(e):
                    continue
                error_msg = f"Error deleting database {name}: {describe(e)}"
                print(f"      ❌ {error_msg}")
                self.cleanup_stats["errors"].append(error_msg)
        return names

    def cleanup_users(self) -> List[str]:
        sys_db = self.client.system_db
        names = [
            user["username"] for user in sys_db.users()
            if user["username"] not in PROTECTED_USERS and self._matches(user["username"])
        ]
        print(f"   🧹 Users matching '{self.prefix}': {len(names)}")

        for name in names:
            if self.dry_run:
                print(f"      🔍 Would delete user {name} (DRY RUN)")
                continue
            try:
                sys_db.delete_user(name)
                self.cleanup_stats["users_deleted"] += 1
                print(f"      ✅ Deleted user {name}")
            except Exception as e:
                if is_not_found(e):
                    continue
                error_msg = f"Error deleting user {name}: {describe(e)}"
                print(f"      ❌ {error_msg}")
                self.cleanup_stats["errors"].append(error_msg)
        return names

    def run_cleanup(self) -> Dict[str, Any]:
        start_time = time.time()

        print("🧹 Starting Test Data Cleanup...")
        print(f"   Mode: {'DRY RUN' if self.dry_run else 'EXECUTE'}")
        print(f"   Prefix: {self.prefix}")

        self.cleanup_databases()
        self.cleanup_users()

        duration = time.time() - start_time

        print("\n📊 Cleanup Summary:")
        print(f"   Databases Deleted: {self.cleanup_stats['databases_deleted']}")
        print(f"   Users Deleted: {self.cleanup_stats['users_deleted']}")
        print(f"   Duration: {duration:.2f}s")

        if self.cleanup_stats["errors"]:
            print(f"   ⚠️  Errors: {len(self.cleanup_stats['errors'])}")
            for error in self.cleanup_stats["errors"]:
                print(f"      • {error}")
        else:
            print("   ✅ No errors")

        return {
            "success": len(self.cleanup_stats["errors"]) == 0,
            "stats": self.cleanup_stats,
            "duration": duration,
        }


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Remove leftover test databases and users",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  arangotest-cleanup                       # Delete everything with the configured prefix
  arangotest-cleanup --dry-run             # Preview what would be deleted
  arangotest-cleanup --prefix ci_run_42    # Use a different prefix
        """
    )
    parser.add_argument("--dry-run", action="store_true", help="Preview cleanup without making changes")
    parser.add_argument("--prefix", help="Name prefix to match (default: TEST_DATA_PREFIX)")
    return parser


def main(argv: Optional[List[str]] = None, config: Optional[TestConfig] = None) -> int:
    args = create_argument_parser().parse_args(argv)

    try:
        config = config or get_config()
    except ValueError as e:
        print(f"❌ {e}")
        return 1
    configure_logging(config)

    prefix = args.prefix or config.test_data_prefix
    if not prefix:
        print("❌ Refusing to clean up with an empty prefix")
        return 1

    try:
        client = build_client(config)
    except Exception as e:
        print(f"❌ Cannot create client: {describe(e)}")
        return 1

    with client:
        try:
            result = TestDataCleanupJob(client, prefix, dry_run=args.dry_run).run_cleanup()
        except Exception as e:
            print(f"❌ Cleanup job failed: {describe(e)}")
            return 1
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
