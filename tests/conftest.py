"""Shared pytest configuration for TreeViewLib tests."""


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: large-tree performance tests, excluded by run_tests.py")
