"""
Test bootstrap:
- Make the shared ``helpers`` package importable from every test directory
- Provide scripted factomd / walletd fixtures
"""
import sys
import pathlib
import pytest

TESTS_DIR = pathlib.Path(__file__).parent

if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import MockFactomd, MockWalletd, EC_PUBLIC, EC_PRIVATE, FCT_PUBLIC_1, FCT_PRIVATE_1  # noqa: E402


@pytest.fixture
def factomd():
    """Scripted factomd client."""
    return MockFactomd()


@pytest.fixture
def walletd():
    """Scripted walletd holding the test EC and Factoid keys."""
    return MockWalletd({EC_PUBLIC: EC_PRIVATE, FCT_PUBLIC_1: FCT_PRIVATE_1})
