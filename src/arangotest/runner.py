"""
Integration suite runner
Checks that the configured deployment answers, then runs pytest on the suites
"""

import argparse
import os
import sys
import time
from typing import List, Optional

import pytest

from .config import TEST_MODES, configure_logging, get_config
from .core.client import build_client, wait_until_server_available
from .utils.error_handling import describe


def run_connectivity_test(config) -> bool:
    """Test basic connectivity and authentication"""
    print("🔍 Testing Connectivity & Authentication...")
    print(f"   Endpoints: {', '.join(config.resolved_endpoints) or '(none)'}")
    print(f"   Mode: {config.mode}")

    try:
        with build_client(config) as client:
            wait_until_server_available(client, timeout=config.wait_timeout)
            info = client.version()
            print(f"   ✅ Server {info.server} {info.version} ({info.license})")
            print(f"   ✅ Server role: {client.server_role()}")
    except TimeoutError:
        print(f"   ❌ Server not available within {config.wait_timeout}s")
        return False
    except Exception as e:
        print(f"   ❌ Connectivity test failed: {describe(e)}")
        return False

    return True


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the ArangoDB integration suites against TEST_ENDPOINTS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  arangotest-run                              # Full run against TEST_ENDPOINTS
  arangotest-run --mode cluster               # Include cluster-only suites
  arangotest-run --fast                       # Run only fast (smoke) tests
  arangotest-run -- -k documents -x           # Extra arguments go to pytest
        """
    )
    parser.add_argument("--mode", choices=TEST_MODES, help="Deployment topology (sets TEST_MODE)")
    parser.add_argument("--fast", action="store_true", help="Run only fast (smoke) tests")
    parser.add_argument("--skip-slow", action="store_true", help="Skip slow tests")
    parser.add_argument("--smoke-only", action="store_true", help="Run only smoke tests")
    parser.add_argument("--path", default=os.path.join("tests", "integration"), help="Suite directory")
    parser.add_argument("--skip-connectivity", action="store_true", help="Do not check the server first")
    parser.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Arguments passed to pytest")
    return parser


def build_pytest_args(args) -> List[str]:
    pytest_args = [args.path, "-m", "integration"]
    if args.fast:
        pytest_args.append("--fast")
    if args.skip_slow:
        pytest_args.append("--skip-slow")
    if args.smoke_only:
        pytest_args.append("--smoke-only")
    extra = [a for a in args.pytest_args if a != "--"]
    return pytest_args + extra


def main(argv: Optional[List[str]] = None) -> int:
    args = create_argument_parser().parse_args(argv)

    if args.mode:
        os.environ["TEST_MODE"] = args.mode

    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ {e}")
        return 1
    configure_logging(config)

    print("=" * 60)
    print("🚀 ARANGODB DRIVER INTEGRATION SUITES")
    print("=" * 60)

    if not config.endpoints:
        print("❌ TEST_ENDPOINTS is not set")
        return 1

    if not args.skip_connectivity and not run_connectivity_test(config):
        print("\n❌ Connectivity test failed - check configuration")
        return 1

    start_time = time.time()
    exit_code = int(pytest.main(build_pytest_args(args)))
    total_duration = time.time() - start_time

    print("\n" + "=" * 60)
    print(f"🏁 Test Suite Complete ({total_duration:.2f}s), exit code {exit_code}")
    print("=" * 60)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
