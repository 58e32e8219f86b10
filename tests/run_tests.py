#!/usr/bin/env python3
"""
Test runner for the field ops service.
Runs each test module on its own and prints a per-module summary.
"""

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent

# Bottom-up: pure helpers first, HTTP layer last
TEST_MODULES = [
    "pricing",
    "document_store",
    "catalog_settings",
    "customers_portal",
    "jobs",
    "quotes",
    "invoices_payments",
    "reports",
    "config_logging",
    "api",
]


def _module_path(name: str) -> str:
    return str(TESTS_DIR / f"test_{name}.py")


def run_tests():
    """Run all test modules and report which ones failed"""
    sys.path.insert(0, str(TESTS_DIR.parent))

    print("🧪 Running Field Ops Tests")
    print("=" * 60)

    passed, failed = [], []
    for name in TEST_MODULES:
        print(f"\n📋 Testing Module: {name}")
        print("-" * 40)

        result = pytest.main([_module_path(name), "-v", "--tb=short", "--no-header"])
        if result == 0:
            print(f"✅ {name}: PASSED")
            passed.append(name)
        else:
            print(f"❌ {name}: FAILED")
            failed.append(name)

    print("\n" + "=" * 60)
    print("📊 TEST SUMMARY")
    print("=" * 60)
    print(f"Total Modules: {len(TEST_MODULES)}")
    print(f"Passed: {len(passed)}")
    print(f"Failed: {len(failed)}")

    if failed:
        print(f"\n⚠️  Failed modules: {', '.join(failed)}")
        return False
    print("\n🎉 All tests passed!")
    return True


def run_individual_test(module_name):
    """Run tests for a specific module"""
    print(f"🧪 Running tests for: {module_name}")
    print("=" * 40)

    sys.path.insert(0, str(TESTS_DIR.parent))
    return pytest.main([_module_path(module_name), "-v", "--tb=long"]) == 0


if __name__ == "__main__":
    if len(sys.argv) > 1:
        success = run_individual_test(sys.argv[1])
    else:
        success = run_tests()
    sys.exit(0 if success else 1)
