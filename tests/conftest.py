import logging
import os
import shutil
import tempfile

import pytest


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    if os.path.exists(temp_dir):
        shutil.rmtree(temp_dir)


@pytest.fixture
def reference_records():
    """(x, y) datapoints on a small graph, labeled alternately a and b."""
    features = [
        [1.0, 1.0],
        [2.0, 2.0],
        [1.5, 2.5],
        [1.0, 3.0],
        [2.0, 1.0],
        [1.0, 2.0],
        [3.0, 1.0],
        [2.5, 1.5],
    ]
    labels = ["a", "b", "a", "b", "a", "b", "a", "b"]
    return features, labels


@pytest.fixture(autouse=True)
def reset_knn_logger():
    """Drop handlers added by setup_logging so they don't outlive captured streams."""
    yield
    logger = logging.getLogger("knn")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
